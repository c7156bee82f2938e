"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from notion_drive_bridge.config import Settings
from notion_drive_bridge.google.auth import TokenMinter
from notion_drive_bridge.google.drive import DriveClient
from notion_drive_bridge.notion.client import NotionClient
from notion_drive_bridge.notion.records import RecordStore
from notion_drive_bridge.sync.dispatcher import EventDispatcher
from notion_drive_bridge.webhook.handler import router as webhook_router

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_token_minter(settings: Settings) -> TokenMinter:
    return TokenMinter(
        settings.google_service_account_email,
        settings.google_service_account_private_key,
        scope=settings.drive_scope,
        token_endpoint=settings.google_token_uri,
        reuse_tokens=settings.drive_token_reuse,
    )


def build_record_store(settings: Settings, notion_client: NotionClient) -> RecordStore:
    return RecordStore(
        notion_client,
        title_property=settings.notion_title_property,
        folder_id_property=settings.notion_folder_id_property,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings()
    configure_logging(settings)

    # Initialize clients
    notion_client = NotionClient(settings.notion_api_key)
    token_minter = build_token_minter(settings)
    drive_client = DriveClient(token_minter)

    app.state.settings = settings
    app.state.dispatcher = EventDispatcher(
        build_record_store(settings, notion_client),
        drive_client,
        root_folder_id=settings.drive_root_folder,
    )

    logger.info("Notion Drive bridge started")
    yield

    # Cleanup
    await drive_client.close()
    await token_minter.close()
    await notion_client.close()
    logger.info("Notion Drive bridge stopped")


app = FastAPI(title="Notion Drive Bridge", lifespan=lifespan)
app.include_router(webhook_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "notion_drive_bridge.main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
