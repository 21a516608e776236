import pytest

from preservica_client.clients import WorkflowClient
from preservica_client.error import RequestValidationError, XmlShapeError
from preservica_client.model.workflow import Parameter, StartWorkflowRequest
from preservica_client.xml.elements import find_all, parse_document, text_of

INSTANCES_PATH = "/sdb/rest/workflow/instances"
WORKFLOW_NS = 'xmlns="http://workflow.preservica.com"'


@pytest.fixture
def workflow_client(client) -> WorkflowClient:
    return WorkflowClient(client)


class TestStartWorkflow:
    @pytest.mark.asyncio
    async def test_returns_instance_id(self, workflow_client, stub_api):
        stub_api.add_xml(
            "POST",
            INSTANCES_PATH,
            f"<WorkflowInstance {WORKFLOW_NS}><Id> 42 </Id><State>Active</State></WorkflowInstance>",
        )
        request = StartWorkflowRequest(
            workflow_context_name="Ingest",
            parameters=(Parameter(key="OpexContainerDirectory", value="opex/1"),),
            correlation_id="corr-1",
        )

        assert await workflow_client.start_workflow(request) == 42

        (sent,) = stub_api.requests_to(INSTANCES_PATH)
        assert sent.headers["Content-Type"] == "application/xml"
        body = parse_document(sent.content)
        assert text_of(body, "WorkflowContextName") == "Ingest"
        assert text_of(body, "WorkflowContextId") is None
        assert text_of(body, "CorrelationId") == "corr-1"
        (parameter,) = find_all(body, "Parameter")
        assert text_of(parameter, "Key") == "OpexContainerDirectory"

    @pytest.mark.asyncio
    async def test_requires_context(self, workflow_client, stub_api):
        with pytest.raises(RequestValidationError, match="workflowContextName or a workflowContextId"):
            await workflow_client.start_workflow(StartWorkflowRequest())

        assert stub_api.requests == []

    @pytest.mark.asyncio
    async def test_context_id_only(self, workflow_client, stub_api):
        stub_api.add_xml("POST", INSTANCES_PATH, f"<WorkflowInstance {WORKFLOW_NS}><Id>7</Id></WorkflowInstance>")

        assert await workflow_client.start_workflow(StartWorkflowRequest(workflow_context_id=12)) == 7

        body = parse_document(stub_api.requests_to(INSTANCES_PATH)[0].content)
        assert text_of(body, "WorkflowContextId") == "12"

    @pytest.mark.asyncio
    async def test_missing_id_raises(self, workflow_client, stub_api):
        stub_api.add_xml("POST", INSTANCES_PATH, f"<WorkflowInstance {WORKFLOW_NS}/>")

        with pytest.raises(XmlShapeError, match="'Id' does not exist on the workflowInstance response"):
            await workflow_client.start_workflow(StartWorkflowRequest(workflow_context_name="Ingest"))

    @pytest.mark.asyncio
    async def test_non_numeric_id_raises(self, workflow_client, stub_api):
        stub_api.add_xml("POST", INSTANCES_PATH, f"<WorkflowInstance {WORKFLOW_NS}><Id>abc</Id></WorkflowInstance>")

        with pytest.raises(XmlShapeError, match="is not a number") as exc_info:
            await workflow_client.start_workflow(StartWorkflowRequest(workflow_context_name="Ingest"))

        assert "WorkflowInstance" in exc_info.value.fragment
