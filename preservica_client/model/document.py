"""Admin documents (schemas, transforms, index definitions, metadata templates)."""

from abc import ABC, abstractmethod

from preservica_client.model.value import ValueObject


class DocumentInfo(ValueObject, ABC):
    """An XML document managed through the admin API."""

    name: str
    xml_data: str

    @property
    @abstractmethod
    def query_params(self) -> dict[str, str]:
        """Query parameters the admin API expects alongside the uploaded XML."""
        ...


class SchemaFileInfo(DocumentInfo):
    description: str
    original_name: str

    @property
    def query_params(self) -> dict[str, str]:
        return {
            "name": self.name,
            "description": self.description,
            "originalName": self.original_name,
        }


class TransformFileInfo(DocumentInfo):
    from_: str
    to: str
    purpose: str
    original_name: str

    @property
    def query_params(self) -> dict[str, str]:
        return {
            "name": self.name,
            "from": self.from_,
            "to": self.to,
            "purpose": self.purpose,
            "originalName": self.original_name,
        }


class IndexDefinitionInfo(DocumentInfo):
    @property
    def query_params(self) -> dict[str, str]:
        return {"name": self.name, "type": "CustomIndexDefinition"}


class MetadataTemplateInfo(DocumentInfo):
    @property
    def query_params(self) -> dict[str, str]:
        return {"name": self.name, "type": "MetadataTemplate"}
