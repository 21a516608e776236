from preservica_client.clients.admin import AdminClient
from preservica_client.clients.content import ContentClient
from preservica_client.clients.entity import EntityClient
from preservica_client.clients.process_monitor import ProcessMonitorClient
from preservica_client.clients.user import UserClient
from preservica_client.clients.workflow import WorkflowClient

__all__ = [
    "AdminClient",
    "ContentClient",
    "EntityClient",
    "ProcessMonitorClient",
    "UserClient",
    "WorkflowClient",
]
