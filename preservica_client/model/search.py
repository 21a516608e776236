from pydantic import Field

from preservica_client.model.value import ValueObject


class SearchField(ValueObject):
    name: str
    values: list[str] = Field(default_factory=list)


class SearchQuery(ValueObject):
    q: str
    fields: list[SearchField] = Field(default_factory=list)
