import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from notion_drive_bridge.config import Settings

WEBHOOK_SECRET = "secret_test_signing_key"


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture(scope="session")
def private_key_pem(rsa_private_key) -> str:
    return rsa_private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def settings(private_key_pem) -> Settings:
    return Settings(
        _env_file=None,
        notion_api_key="secret_notion",
        notion_webhook_secret=WEBHOOK_SECRET,
        google_service_account_email="bridge@project.iam.gserviceaccount.com",
        # Stored the way it arrives from an env var: escaped newlines.
        google_service_account_private_key=private_key_pem.replace("\n", "\\n"),
        drive_root_folder="root-folder-id",
    )


@pytest.fixture
def notion_page():
    """Factory for Notion page objects as returned by GET /v1/pages/{id}."""

    def _page(page_id: str, title: str | None, folder_id: str | None = None) -> dict:
        return {
            "object": "page",
            "id": page_id,
            "properties": {
                "Name": {
                    "id": "title",
                    "type": "title",
                    "title": [{"plain_text": title}] if title else [],
                },
                "Drive Folder ID": {
                    "id": "fldr",
                    "type": "rich_text",
                    "rich_text": [{"plain_text": folder_id}] if folder_id else [],
                },
            },
        }

    return _page
