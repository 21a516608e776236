from datetime import datetime
from uuid import UUID

from preservica_client.model.value import ValueObject


class EventAction(ValueObject):
    """An event recorded against an entity. Ordered by date_of_event."""

    event_ref: UUID
    event_type: str
    date_of_event: datetime
