"""Maps webhook events onto Drive folder operations."""

import logging

from notion_drive_bridge.google.drive import DriveClient
from notion_drive_bridge.notion.records import RecordStore
from notion_drive_bridge.webhook.models import EventType, WebhookEvent

logger = logging.getLogger(__name__)


class EventDispatcher:
    def __init__(
        self,
        records: RecordStore,
        drive: DriveClient,
        *,
        root_folder_id: str = "root",
    ) -> None:
        self._records = records
        self._drive = drive
        self._root_folder_id = root_folder_id

    async def dispatch(self, events: list[WebhookEvent]) -> None:
        """Process events one at a time, in delivery order.

        The first failure propagates and the remaining events are not processed.
        """
        for event in events:
            await self.handle_event(event)

    async def handle_event(self, event: WebhookEvent) -> None:
        event_type = event.known_type
        if event_type is None:
            logger.debug("Ignoring event type: %s", event.event_type)
            return

        record_id = event.record_id
        snapshot = await self._records.get_snapshot(record_id)
        folder_id = snapshot.external_folder_id

        if event_type is EventType.PAGE_CREATED:
            new_folder_id = await self._drive.create_folder(
                snapshot.title, self._root_folder_id
            )
            # Must land before the next event so later updates can find the folder.
            await self._records.set_folder_id(record_id, new_folder_id)

        elif event_type is EventType.PAGE_UPDATED:
            if not folder_id:
                logger.debug("Page %s has no folder id, skipping rename", record_id)
                return
            await self._drive.rename_folder(folder_id, snapshot.title)

        elif event_type is EventType.PAGE_DELETED:
            if not folder_id:
                logger.debug("Page %s has no folder id, skipping trash", record_id)
                return
            await self._drive.trash_folder(folder_id)
