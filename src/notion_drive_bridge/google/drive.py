import logging

import httpx

from notion_drive_bridge.errors import GatewayError
from notion_drive_bridge.google.auth import TokenMinter

logger = logging.getLogger(__name__)

DRIVE_API_BASE = "https://www.googleapis.com/drive/v3"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


class DriveClient:
    """The narrow set of Drive folder operations the bridge needs."""

    def __init__(
        self,
        token_source: TokenMinter,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._tokens = token_source
        self._client = httpx.AsyncClient(
            base_url=DRIVE_API_BASE,
            headers={"Content-Type": "application/json"},
            params={"supportsAllDrives": "true"},
            transport=transport,
            timeout=30.0,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        token = await self._tokens.get_token()
        try:
            return await self._client.request(
                method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
            )
        except httpx.TimeoutException as exc:
            raise GatewayError(f"Drive {method} {url} timed out", retryable=True) from exc
        except httpx.HTTPError as exc:
            raise GatewayError(f"Drive {method} {url} failed: {exc}") from exc

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send an authenticated request, raising GatewayError on failure."""
        resp = await self._send(method, url, **kwargs)

        if resp.status_code == 401:
            logger.warning("Drive rejected the access token, minting a new one")
            self._tokens.invalidate()
            resp = await self._send(method, url, **kwargs)

        if not resp.is_success:
            raise GatewayError(
                f"Drive {method} {url} returned {resp.status_code}: {resp.text[:200]}",
                status_code=resp.status_code,
                retryable=resp.status_code == 429 or resp.status_code >= 500,
            )
        return resp

    async def create_folder(self, name: str, parent_folder_id: str) -> str:
        """Create a folder under ``parent_folder_id`` and return its id."""
        resp = await self._request(
            "POST",
            "/files",
            json={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [parent_folder_id]},
        )
        try:
            folder_id = resp.json().get("id")
        except (ValueError, AttributeError):
            folder_id = None
        if not folder_id:
            raise GatewayError("Drive create response has no folder id")

        logger.info("Created Drive folder %s (%r)", folder_id, name)
        return folder_id

    async def rename_folder(self, folder_id: str, new_name: str) -> None:
        await self._request("PATCH", f"/files/{folder_id}", json={"name": new_name})
        logger.info("Renamed Drive folder %s to %r", folder_id, new_name)

    async def trash_folder(self, folder_id: str) -> None:
        """Move a folder to the Drive trash. Folders are never permanently deleted."""
        await self._request("PATCH", f"/files/{folder_id}", json={"trashed": True})
        logger.info("Trashed Drive folder %s", folder_id)
