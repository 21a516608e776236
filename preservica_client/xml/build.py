"""Writers for request bodies.

Documents are assembled with ElementTree so text content is escaped on
serialization, and optional elements are left out rather than sent empty.
"""

from uuid import UUID
from xml.etree import ElementTree

from preservica_client.model.entity import EntityType, SecurityTag
from preservica_client.model.workflow import StartWorkflowRequest

XIP_NAMESPACE = "http://preservica.com/XIP/v7.0"
WORKFLOW_NAMESPACE = "http://workflow.preservica.com"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>\n'


def _to_document(root: ElementTree.Element) -> str:
    ElementTree.indent(root)
    return XML_DECLARATION + ElementTree.tostring(root, encoding="unicode")


def _add_text(parent: ElementTree.Element, tag: str, text: str | None) -> None:
    if text is None:
        return
    ElementTree.SubElement(parent, tag).text = text


def entity_request(
    entity_type: EntityType,
    title: str,
    security_tag: SecurityTag,
    ref: UUID | None = None,
    description: str | None = None,
    parent_ref: UUID | None = None,
    wrap_in_xip: bool = False,
    namespace: str = XIP_NAMESPACE,
) -> str:
    """Body for creating or updating a structural, information or content object."""
    if wrap_in_xip:
        root = ElementTree.Element("XIP", xmlns=namespace)
        node = ElementTree.SubElement(root, entity_type.value)
    else:
        root = node = ElementTree.Element(entity_type.value, xmlns=namespace)

    _add_text(node, "Ref", str(ref) if ref else None)
    _add_text(node, "Title", title)
    _add_text(node, "Description", description)
    _add_text(node, "SecurityTag", security_tag.value)
    _add_text(node, "Parent", str(parent_ref) if parent_ref else None)
    return _to_document(root)


def identifier_request(name: str, value: str, namespace: str = XIP_NAMESPACE) -> str:
    root = ElementTree.Element("Identifier", xmlns=namespace)
    _add_text(root, "Type", name)
    _add_text(root, "Value", value)
    return _to_document(root)


def start_workflow_request(request: StartWorkflowRequest) -> str:
    root = ElementTree.Element("StartWorkflowRequest", xmlns=WORKFLOW_NAMESPACE)
    if request.workflow_context_id is not None:
        _add_text(root, "WorkflowContextId", str(request.workflow_context_id))
    _add_text(root, "WorkflowContextName", request.workflow_context_name)
    _add_text(root, "CorrelationId", request.correlation_id)
    for parameter in request.parameters:
        node = ElementTree.SubElement(root, "Parameter")
        _add_text(node, "Key", parameter.key)
        _add_text(node, "Value", parameter.value)
    return _to_document(root)
