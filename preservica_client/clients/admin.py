"""Admin API: schemas, transforms, index definitions and metadata templates."""

import logging

import logfire

from preservica_client.client import Client
from preservica_client.model.document import (
    DocumentInfo,
    IndexDefinitionInfo,
    MetadataTemplateInfo,
    SchemaFileInfo,
    TransformFileInfo,
)
from preservica_client.xml import parse

logger = logging.getLogger(__name__)

ADMIN_API_PATH = "/api/admin/v7.0"


class AdminClient:
    """Replaces admin documents by name: any existing document is deleted, then re-created."""

    def __init__(self, client: Client) -> None:
        self._client = client

    async def _update_documents(
        self, documents: list[DocumentInfo], path: str, element_name: str
    ) -> None:
        url = f"{await self._client.api_base_url()}{ADMIN_API_PATH}/{path}"
        existing = await self._client.send_xml("GET", url)

        for document in documents:
            api_id = parse.existing_api_id(existing, element_name, document.name)
            if api_id is not None:
                logger.info("Deleting existing %s %s (%s)", element_name, document.name, api_id)
                await self._client.send("DELETE", f"{url}/{api_id}")
            await self._client.send(
                "POST",
                url,
                params=document.query_params,
                content=document.xml_data,
                headers={"Content-Type": "application/xml"},
            )
            logfire.info("Admin document uploaded", path=path, name=document.name)

    async def add_or_update_schemas(self, schemas: list[SchemaFileInfo]) -> None:
        await self._update_documents(schemas, "schemas", "Schema")

    async def add_or_update_transforms(self, transforms: list[TransformFileInfo]) -> None:
        await self._update_documents(transforms, "transforms", "Transform")

    async def add_or_update_index_definitions(self, definitions: list[IndexDefinitionInfo]) -> None:
        await self._update_documents(definitions, "documents", "Document")

    async def add_or_update_metadata_templates(self, templates: list[MetadataTemplateInfo]) -> None:
        await self._update_documents(templates, "documents", "Document")
