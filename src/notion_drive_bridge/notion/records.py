"""Page snapshots read from (and folder ids written to) the Notion database."""

import logging
from dataclasses import dataclass

import httpx

from notion_drive_bridge.errors import RecordStoreError
from notion_drive_bridge.notion.client import NotionClient
from notion_drive_bridge.notion.property_parser import (
    extract_folder_id,
    extract_title,
    rich_text_value,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordSnapshot:
    record_id: str
    title: str
    external_folder_id: str | None


class RecordStore:
    def __init__(
        self,
        notion_client: NotionClient,
        *,
        title_property: str = "Name",
        folder_id_property: str = "Drive Folder ID",
    ) -> None:
        self._notion = notion_client
        self._title_property = title_property
        self._folder_id_property = folder_id_property

    def snapshot_from_page(self, page: dict) -> RecordSnapshot:
        properties = page.get("properties", {})
        return RecordSnapshot(
            record_id=page["id"],
            title=extract_title(properties, self._title_property),
            external_folder_id=extract_folder_id(properties, self._folder_id_property),
        )

    async def get_snapshot(self, record_id: str) -> RecordSnapshot:
        """Fetch the live state of a page. Never cached."""
        try:
            page = await self._notion.get_page(record_id)
        except httpx.TimeoutException as exc:
            raise RecordStoreError(
                f"Timed out reading Notion page {record_id}", retryable=True
            ) from exc
        except httpx.HTTPError as exc:
            raise RecordStoreError(f"Cannot read Notion page {record_id}: {exc}") from exc
        return self.snapshot_from_page({**page, "id": record_id})

    async def set_folder_id(self, record_id: str, folder_id: str) -> None:
        try:
            await self._notion.update_page_properties(
                record_id, {self._folder_id_property: rich_text_value(folder_id)}
            )
        except httpx.HTTPError as exc:
            raise RecordStoreError(
                f"Cannot write folder id to Notion page {record_id}: {exc}"
            ) from exc
        logger.info("Stored folder id %s on page %s", folder_id, record_id)
