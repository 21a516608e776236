from preservica_client.model.auth import AuthToken, Credentials
from preservica_client.model.bitstream import BitStreamInfo, Fixity, GenerationType
from preservica_client.model.document import (
    DocumentInfo,
    IndexDefinitionInfo,
    MetadataTemplateInfo,
    SchemaFileInfo,
    TransformFileInfo,
)
from preservica_client.model.entity import (
    AddEntityRequest,
    Entity,
    EntityType,
    Identifier,
    IdentifierResponse,
    RepresentationType,
    SecurityTag,
    UpdateEntityRequest,
)
from preservica_client.model.event import EventAction
from preservica_client.model.metadata import CoMetadata, EntityMetadata, IoMetadata
from preservica_client.model.monitor import (
    GetMessagesRequest,
    GetMonitorsRequest,
    Message,
    MessageStatus,
    Monitor,
    MonitorCategory,
    MonitorStatus,
)
from preservica_client.model.page import Page
from preservica_client.model.search import SearchField, SearchQuery
from preservica_client.model.workflow import Parameter, StartWorkflowRequest

__all__ = [
    "AddEntityRequest",
    "AuthToken",
    "BitStreamInfo",
    "CoMetadata",
    "Credentials",
    "DocumentInfo",
    "Entity",
    "EntityMetadata",
    "EntityType",
    "EventAction",
    "Fixity",
    "GenerationType",
    "GetMessagesRequest",
    "GetMonitorsRequest",
    "Identifier",
    "IdentifierResponse",
    "IndexDefinitionInfo",
    "IoMetadata",
    "Message",
    "MessageStatus",
    "MetadataTemplateInfo",
    "Monitor",
    "MonitorCategory",
    "MonitorStatus",
    "Page",
    "Parameter",
    "RepresentationType",
    "SchemaFileInfo",
    "SearchField",
    "SearchQuery",
    "SecurityTag",
    "StartWorkflowRequest",
    "TransformFileInfo",
    "UpdateEntityRequest",
]
