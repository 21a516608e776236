"""XML mapping between API documents and model objects."""

from preservica_client.xml import build, parse
from preservica_client.xml.elements import parse_document

__all__ = ["build", "parse", "parse_document"]
