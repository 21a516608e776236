"""Process monitors and their messages, as returned by the process monitor API."""

from enum import StrEnum

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

from preservica_client.model.value import ValueObject


class MonitorStatus(StrEnum):
    RUNNING = "Running"
    PENDING = "Pending"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    SUSPENDED = "Suspended"
    RECOVERABLE = "Recoverable"


class MonitorCategory(StrEnum):
    INGEST = "Ingest"
    EXPORT = "Export"
    DATA_MANAGEMENT = "DataManagement"
    AUTOMATED = "Automated"


class MessageStatus(StrEnum):
    ERROR = "Error"
    INFO = "Info"
    DEBUG = "Debug"
    WARNING = "Warning"


def _joined(values: tuple[str, ...]) -> str | None:
    return ",".join(values) if values else None


def _without_empty(params: dict[str, str | None]) -> dict[str, str]:
    return {name: value for name, value in params.items() if value}


class GetMonitorsRequest(ValueObject):
    status: tuple[MonitorStatus, ...] = ()
    name: str | None = None
    category: tuple[MonitorCategory, ...] = ()

    @property
    def query_params(self) -> dict[str, str]:
        """Filters as query parameters; empty filters are left out."""
        return _without_empty(
            {
                "status": _joined(self.status),
                "name": self.name,
                "category": _joined(self.category),
            }
        )


class GetMessagesRequest(ValueObject):
    monitor: tuple[str, ...] = ()
    status: tuple[MessageStatus, ...] = ()

    @property
    def query_params(self) -> dict[str, str]:
        return _without_empty({"monitor": _joined(self.monitor), "status": _joined(self.status)})


class MonitorValue(ValueObject):
    """Base for API payload objects, which use camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Monitor(MonitorValue):
    mapped_id: str
    name: str
    status: str
    started: str | None = None
    completed: str | None = None
    category: str
    subcategory: str
    progress_text: str | None = None
    percent_complete: str | None = None
    files_pending: int
    size: int
    files_processed: int
    warnings: int
    errors: int
    can_retry: bool


class Message(MonitorValue):
    workflow_instance_id: int
    monitor_name: str
    path: str
    date: str
    status: str
    display_message: str
    workflow_name: str
    mapped_monitor_id: str
    message: str
    mapped_id: str
    security_descriptor: str | None = None
    entity_title: str | None = None
    entity_ref: str | None = None
    source_id: str | None = None
