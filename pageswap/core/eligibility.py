"""Eligibility filters deciding which clicks and submits get intercepted."""

from __future__ import annotations

from urllib.parse import urldefrag, urljoin, urlsplit

from bs4 import Tag

from pageswap.host.events import ClickEvent, Event

_NAVIGABLE_SCHEMES = {"http", "https"}


def is_handleable_event(event: Event) -> bool:
    """Events whose default was already prevented upstream belong to someone else."""
    return not event.default_prevented


def is_handleable_element(element: Tag) -> bool:
    """Elements targeting another browsing context are left to the browser."""
    target = element.get("target")
    if target is None:
        return True
    return target.strip().lower() in ("", "_self")


def is_primary_activation(event: ClickEvent) -> bool:
    """Only a plain primary-button click; modifier chords open new tabs/windows."""
    if event.button != 0:
        return False
    return not (event.ctrl_key or event.alt_key or event.shift_key or event.meta_key)


def is_fragment_navigation(href: str, current_url: str) -> bool:
    """True for ``#frag`` links and links to the current page that only add a fragment."""
    if href.startswith("#"):
        return True
    if "#" not in href:
        return False
    target, _ = urldefrag(urljoin(current_url, href))
    current, _ = urldefrag(current_url)
    return target == current


def is_handleable_url(url: str, current_url: str) -> bool:
    """Relative URLs and absolute http(s) URLs on the current origin."""
    scheme = urlsplit(url).scheme.lower()
    if scheme and scheme not in _NAVIGABLE_SCHEMES:
        return False

    resolved = urlsplit(urljoin(current_url, url))
    current = urlsplit(current_url)
    if resolved.scheme.lower() not in _NAVIGABLE_SCHEMES:
        return False
    return (resolved.scheme.lower(), resolved.netloc.lower()) == (
        current.scheme.lower(),
        current.netloc.lower(),
    )


def is_navigable_response(content_type: str, content_disposition: str) -> bool:
    """False for downloads: attachment dispositions or non-text media types."""
    disposition = content_disposition.split(";", 1)[0].strip().lower()
    if disposition == "attachment":
        return False

    media_type = content_type.split(";", 1)[0].strip().lower()
    if not media_type:
        return True
    if media_type.startswith("text/"):
        return True
    return media_type in ("application/xhtml+xml", "application/xml") or media_type.endswith("+xml")
