from pageswap.dom.document import Document, parse_document
from pageswap.dom.replacer import MissingContainer, Replaced, replace_containers

__all__ = ["Document", "MissingContainer", "Replaced", "parse_document", "replace_containers"]
