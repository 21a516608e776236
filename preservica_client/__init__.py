"""Async client for the Preservica REST API."""

from preservica_client.clients import (
    AdminClient,
    ContentClient,
    EntityClient,
    ProcessMonitorClient,
    UserClient,
    WorkflowClient,
)
from preservica_client.config import ClientConfig, configure_logging
from preservica_client.error import PreservicaClientError
from preservica_client.factory import (
    create_admin_client,
    create_client,
    create_content_client,
    create_entity_client,
    create_process_monitor_client,
    create_user_client,
    create_workflow_client,
)

__all__ = [
    "AdminClient",
    "ClientConfig",
    "ContentClient",
    "EntityClient",
    "PreservicaClientError",
    "ProcessMonitorClient",
    "UserClient",
    "WorkflowClient",
    "configure_logging",
    "create_admin_client",
    "create_client",
    "create_content_client",
    "create_entity_client",
    "create_process_monitor_client",
    "create_user_client",
    "create_workflow_client",
]
