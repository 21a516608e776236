"""Workflow API."""

import logging

import logfire

from preservica_client.client import Client
from preservica_client.error import RequestValidationError, XmlShapeError
from preservica_client.model.workflow import StartWorkflowRequest
from preservica_client.xml import build, parse
from preservica_client.xml.elements import fragment

logger = logging.getLogger(__name__)

WORKFLOW_INSTANCES_PATH = "/sdb/rest/workflow/instances"


class WorkflowClient:
    def __init__(self, client: Client) -> None:
        self._client = client

    async def start_workflow(self, request: StartWorkflowRequest) -> int:
        """Start a workflow and return the new instance id."""
        if request.workflow_context_name is None and request.workflow_context_id is None:
            raise RequestValidationError(
                "You must pass in either a workflowContextName or a workflowContextId!"
            )

        with logfire.span("StartWorkflow"):
            url = f"{await self._client.api_base_url()}{WORKFLOW_INSTANCES_PATH}"
            response = await self._client.send_xml("POST", url, build.start_workflow_request(request))
            instance_id = parse.workflow_instance_child(response, "Id").strip()
            try:
                workflow_id = int(instance_id)
            except ValueError as e:
                raise XmlShapeError(
                    f"Workflow instance id {instance_id!r} is not a number", fragment(response)
                ) from e
            logfire.info("Workflow started", workflow_id=workflow_id)
            return workflow_id
