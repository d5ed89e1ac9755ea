"""Form serialization — successful controls of an HTML form."""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit, urlunsplit

from bs4 import Tag

from pageswap.core.types import BodyEncoding, FilePart, FormBody

# Input types that never contribute a value to a serialized form
_EXCLUDED_INPUT_TYPES = {"submit", "button", "reset", "image"}


def form_fields(form: Tag) -> list[tuple[str, str]]:
    """Return (name, value) pairs for the form's successful controls, in document order."""
    pairs: list[tuple[str, str]] = []
    for control in form.find_all(["input", "select", "textarea"]):
        name = control.get("name")
        if not name or control.has_attr("disabled"):
            continue

        if control.name == "input":
            input_type = (control.get("type") or "text").lower()
            if input_type in _EXCLUDED_INPUT_TYPES or input_type == "file":
                continue
            if input_type in ("checkbox", "radio"):
                if control.has_attr("checked"):
                    pairs.append((name, control.get("value", "on")))
                continue
            pairs.append((name, control.get("value", "")))

        elif control.name == "select":
            pairs.extend((name, value) for value in _selected_values(control))

        else:
            pairs.append((name, control.get_text()))
    return pairs


def file_parts(form: Tag) -> list[FilePart]:
    """File inputs submit an empty part when nothing has been chosen."""
    parts: list[FilePart] = []
    for control in form.find_all("input"):
        if (control.get("type") or "").lower() != "file":
            continue
        name = control.get("name")
        if name and not control.has_attr("disabled"):
            parts.append(FilePart(name=name))
    return parts


def encode_form(form: Tag) -> FormBody:
    """Structured multipart payload for a form, as a browser's FormData would build it."""
    return FormBody(
        fields=tuple(form_fields(form)),
        files=tuple(file_parts(form)),
        encoding=BodyEncoding.MULTIPART,
    )


def with_query(url: str, fields: list[tuple[str, str]]) -> str:
    """Replace the query string of ``url`` with url-encoded fields (GET submission)."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(fields), parts.fragment))


def _selected_values(select: Tag) -> list[str]:
    options = select.find_all("option")
    chosen = [o for o in options if o.has_attr("selected") and not o.has_attr("disabled")]
    if not chosen and options and not select.has_attr("multiple"):
        chosen = [options[0]]
    return [o.get("value", o.get_text().strip()) for o in chosen]
