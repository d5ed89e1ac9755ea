"""Document replacer — swaps container regions between two documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from pageswap.dom.document import Document

logger = logging.getLogger(__name__)


@dataclass
class Replaced:
    """Every selector matched in both documents."""

    replaced: list[str] = field(default_factory=list)  # selectors whose element was swapped
    unchanged: list[str] = field(default_factory=list)  # structurally identical, left in place


@dataclass
class MissingContainer:
    selector: str
    side: str  # "current" or "new"


ReplaceResult = Union[Replaced, MissingContainer]


def replace_containers(
    selectors: Iterable[str],
    current: Document,
    candidate: Document,
) -> ReplaceResult:
    """
    Replace the first match of each selector in ``current`` with the first
    match of the same selector in ``candidate``.

    Selectors are processed in order; the first selector that is missing on
    either side stops the pass and is reported as ``MissingContainer``.
    Elements that are structurally identical are left untouched so live
    state such as focus survives.
    """
    result = Replaced()
    for selector in selectors:
        old_element = current.select_first(selector)
        if old_element is None:
            return MissingContainer(selector=selector, side="current")

        new_element = candidate.select_first(selector)
        if new_element is None:
            return MissingContainer(selector=selector, side="new")

        # bs4 compares tags structurally: name, attributes and children
        if old_element == new_element:
            result.unchanged.append(selector)
            continue

        old_element.replace_with(current.import_node(new_element))
        result.replaced.append(selector)

    logger.debug(
        "Replaced %d container(s), %d unchanged", len(result.replaced), len(result.unchanged)
    )
    return result
