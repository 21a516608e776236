"""Process monitor API: ingest and export monitors and their messages."""

import logging
from typing import Any, TypeVar

import logfire
from pydantic import BaseModel, Field, ValidationError

from preservica_client.client import Client, with_params
from preservica_client.error import RequestValidationError, ResponseFormatError
from preservica_client.model.monitor import GetMessagesRequest, GetMonitorsRequest, Message, Monitor
from preservica_client.model.page import Page

logger = logging.getLogger(__name__)

PROCESS_MONITOR_PATH = "/api/processmonitor"
OPEX_PREFIX = "opex"

R = TypeVar("R", bound=BaseModel)


class Paging(BaseModel):
    next: str | None = None
    total_results: int = Field(alias="totalResults")


class MonitorsValue(BaseModel):
    paging: Paging
    monitors: list[Monitor]


class MonitorsResponse(BaseModel):
    success: bool
    version: int
    value: MonitorsValue


class MessagesValue(BaseModel):
    paging: Paging
    messages: list[Message]


class MessagesResponse(BaseModel):
    success: bool
    version: int
    value: MessagesValue


def _validate(model: type[R], payload: Any) -> R:
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseFormatError(f"Unexpected process monitor response ({model.__name__})") from e


def messages_page(payload: Any) -> Page[Message]:
    """One page of messages; value.paging.next links to the following page."""
    response = _validate(MessagesResponse, payload)
    return Page(items=tuple(response.value.messages), next_page_url=response.value.paging.next or None)


class ProcessMonitorClient:
    def __init__(self, client: Client) -> None:
        self._client = client

    async def _api_url(self, resource: str) -> str:
        return f"{await self._client.api_base_url()}{PROCESS_MONITOR_PATH}/{resource}"

    async def get_monitors(self, request: GetMonitorsRequest) -> list[Monitor]:
        """Monitors matching the request. Only OPEX monitors can be looked up by name."""
        if not (request.name or "").startswith(OPEX_PREFIX):
            raise RequestValidationError(f"The monitor name must start with '{OPEX_PREFIX}'")

        url = await self._api_url("monitors")
        payload = await self._client.send_json("GET", url, params=request.query_params)
        return list(_validate(MonitorsResponse, payload).value.monitors)

    async def get_messages(
        self,
        request: GetMessagesRequest,
        start: int = 0,
        max: int = 1000,
    ) -> list[Message]:
        """Messages of the requested monitors, following every result page."""
        with logfire.span("GetMonitorMessages"):
            params = {**request.query_params, "start": start, "max": max}
            url = with_params(await self._api_url("messages"), params)
            messages = await self._client.drain_json(url, messages_page)
            logger.info("Fetched %d process monitor messages", len(messages))
            return messages
