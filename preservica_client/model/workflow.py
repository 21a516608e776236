from preservica_client.model.value import ValueObject


class Parameter(ValueObject):
    key: str
    value: str


class StartWorkflowRequest(ValueObject):
    """Request to start a workflow, by context name or context id."""

    workflow_context_name: str | None = None
    workflow_context_id: int | None = None
    parameters: tuple[Parameter, ...] = ()
    correlation_id: str | None = None
