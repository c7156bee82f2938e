"""Bootstrap CLI: provision Drive folders for existing Notion pages.

Webhooks only cover pages created after the integration is connected. This
walks the whole database once and, for every page that has no folder id yet,
creates its folder under the root and writes the id back onto the page.
"""

import asyncio
import logging
import sys

from notion_drive_bridge.config import Settings
from notion_drive_bridge.google.drive import DriveClient
from notion_drive_bridge.main import build_record_store, build_token_minter, configure_logging
from notion_drive_bridge.notion.client import NotionClient
from notion_drive_bridge.notion.records import RecordStore

logger = logging.getLogger(__name__)


async def provision_missing_folders(
    pages: list[dict],
    records: RecordStore,
    drive: DriveClient,
    root_folder_id: str,
) -> tuple[int, int]:
    """Create folders for pages without one. Returns (created, skipped)."""
    created = 0
    skipped = 0

    for page in pages:
        snapshot = records.snapshot_from_page(page)
        if snapshot.external_folder_id:
            logger.debug(
                "Page %s already has folder %s",
                snapshot.record_id, snapshot.external_folder_id,
            )
            skipped += 1
            continue

        folder_id = await drive.create_folder(snapshot.title, root_folder_id)
        await records.set_folder_id(snapshot.record_id, folder_id)
        created += 1

    return created, skipped


async def bootstrap() -> None:
    settings = Settings()
    configure_logging(settings)

    if not settings.notion_database_id:
        logger.error("NOTION_DATABASE_ID must be set to bootstrap folders")
        sys.exit(1)

    notion_client = NotionClient(settings.notion_api_key)
    token_minter = build_token_minter(settings)
    drive_client = DriveClient(token_minter)
    records = build_record_store(settings, notion_client)

    try:
        logger.info("Querying all pages from Notion database %s", settings.notion_database_id)
        pages = await notion_client.query_all_pages(settings.notion_database_id)
        logger.info("Found %d pages", len(pages))

        created, skipped = await provision_missing_folders(
            pages, records, drive_client, settings.drive_root_folder
        )
        logger.info("Bootstrap complete: %d folders created, %d pages skipped", created, skipped)

    finally:
        await drive_client.close()
        await token_minter.close()
        await notion_client.close()


def main():
    asyncio.run(bootstrap())


if __name__ == "__main__":
    main()
