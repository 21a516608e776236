"""Namespace-agnostic ElementTree lookups.

API responses declare a versioned default namespace that changes between
releases, so every lookup here matches on local names only.
"""

import copy
from xml.etree import ElementTree

from preservica_client.error import XmlShapeError

MAX_FRAGMENT_LENGTH = 2000


def local_name(tag: str) -> str:
    """Strip the "{namespace}" prefix ElementTree puts on tags."""
    return tag.rsplit("}", 1)[-1]


def namespace_of(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def _path(*names: str) -> str:
    return "/".join(f"{{*}}{name}" for name in names)


def find_all(elem: ElementTree.Element, *names: str) -> list[ElementTree.Element]:
    """All elements at the child path names[0]/names[1]/... below elem."""
    return elem.findall(_path(*names))


def find_first(elem: ElementTree.Element, *names: str) -> ElementTree.Element | None:
    return elem.find(_path(*names))


def text_of(elem: ElementTree.Element, *names: str) -> str | None:
    """Text of the first element at the path, or None when there is none."""
    found = find_first(elem, *names)
    if found is None:
        return None
    return found.text or ""


def require_text(elem: ElementTree.Element, *names: str, message: str | None = None) -> str:
    text = text_of(elem, *names)
    if text is None:
        raise XmlShapeError(message or f"Element {'/'.join(names)} not found", fragment(elem))
    return text


def inner_xml(elem: ElementTree.Element) -> str:
    """Serialized children of elem, without elem's own tags."""
    return "".join(ElementTree.tostring(child, encoding="unicode") for child in elem)


def fragment(elem: ElementTree.Element) -> str:
    """Pretty-printed XML for error messages, truncated to a readable length."""
    pretty = copy.deepcopy(elem)
    ElementTree.indent(pretty)
    text = ElementTree.tostring(pretty, encoding="unicode")
    if len(text) > MAX_FRAGMENT_LENGTH:
        return text[:MAX_FRAGMENT_LENGTH] + "..."
    return text


def parse_document(text: str | bytes) -> ElementTree.Element:
    try:
        return ElementTree.fromstring(text)
    except ElementTree.ParseError as e:
        snippet = text.decode(errors="replace") if isinstance(text, bytes) else text
        raise XmlShapeError(
            f"Response is not well-formed XML ({e})", snippet[:MAX_FRAGMENT_LENGTH]
        ) from e
