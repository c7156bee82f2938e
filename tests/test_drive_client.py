"""Tests for the Drive folder operations."""

import json

import httpx
import pytest

from notion_drive_bridge.errors import GatewayError
from notion_drive_bridge.google.auth import TokenMinter
from notion_drive_bridge.google.drive import FOLDER_MIME_TYPE, DriveClient


class StaticTokens:
    def __init__(self) -> None:
        self.calls = 0
        self.invalidated = 0

    async def get_token(self) -> str:
        self.calls += 1
        return f"token-{self.calls}"

    def invalidate(self) -> None:
        self.invalidated += 1


def _drive(requests: list, status: int = 200, body=None) -> DriveClient:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=body if body is not None else {"id": "folder-1"})

    return DriveClient(StaticTokens(), transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_create_folder():
    requests = []
    drive = _drive(requests, body={"kind": "drive#file", "id": "folder-1"})

    folder_id = await drive.create_folder("Project X", "root-folder-id")

    assert folder_id == "folder-1"
    (request,) = requests
    assert request.method == "POST"
    assert request.url.path == "/drive/v3/files"
    assert request.url.params["supportsAllDrives"] == "true"
    assert request.headers["authorization"] == "Bearer token-1"
    assert json.loads(request.content) == {
        "name": "Project X",
        "mimeType": FOLDER_MIME_TYPE,
        "parents": ["root-folder-id"],
    }
    await drive.close()


@pytest.mark.asyncio
async def test_create_folder_without_id_fails():
    with pytest.raises(GatewayError, match="no folder id"):
        await _drive([], body={"kind": "drive#file"}).create_folder("X", "root")


@pytest.mark.asyncio
async def test_create_folder_error_status():
    with pytest.raises(GatewayError) as exc_info:
        await _drive([], status=403, body={"error": {"code": 403}}).create_folder("X", "root")
    assert exc_info.value.status_code == 403
    assert not exc_info.value.retryable


@pytest.mark.asyncio
async def test_rename_folder():
    requests = []
    await _drive(requests).rename_folder("folder-1", "New Name")

    (request,) = requests
    assert request.method == "PATCH"
    assert request.url.path == "/drive/v3/files/folder-1"
    assert json.loads(request.content) == {"name": "New Name"}


@pytest.mark.asyncio
async def test_rename_folder_checks_status():
    with pytest.raises(GatewayError) as exc_info:
        await _drive([], status=404, body={"error": {"code": 404}}).rename_folder("gone", "x")
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_trash_folder_patches_trashed_flag():
    requests = []
    await _drive(requests).trash_folder("folder-1")

    (request,) = requests
    assert request.method == "PATCH"
    assert request.url.path == "/drive/v3/files/folder-1"
    assert json.loads(request.content) == {"trashed": True}


@pytest.mark.asyncio
async def test_trash_folder_server_error_is_retryable():
    with pytest.raises(GatewayError) as exc_info:
        await _drive([], status=503, body={}).trash_folder("folder-1")
    assert exc_info.value.retryable


@pytest.mark.asyncio
async def test_each_call_asks_for_a_token():
    tokens = StaticTokens()
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json={"id": "f"})

    drive = DriveClient(tokens, transport=httpx.MockTransport(handler))
    await drive.rename_folder("f", "a")
    await drive.trash_folder("f")

    assert tokens.calls == 2
    assert [r.headers["authorization"] for r in requests] == ["Bearer token-1", "Bearer token-2"]


@pytest.mark.asyncio
async def test_rejected_token_is_dropped_and_request_retried_once():
    tokens = StaticTokens()
    requests = []

    def handler(request):
        requests.append(request)
        if request.headers["authorization"] == "Bearer token-1":
            return httpx.Response(401, json={"error": {"code": 401}})
        return httpx.Response(200, json={"id": "f"})

    drive = DriveClient(tokens, transport=httpx.MockTransport(handler))
    await drive.rename_folder("f", "New Name")

    assert tokens.invalidated == 1
    assert [r.headers["authorization"] for r in requests] == ["Bearer token-1", "Bearer token-2"]


@pytest.mark.asyncio
async def test_second_401_is_raised():
    tokens = StaticTokens()
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={}))
    drive = DriveClient(tokens, transport=transport)

    with pytest.raises(GatewayError) as exc_info:
        await drive.trash_folder("f")
    assert exc_info.value.status_code == 401
    assert tokens.calls == 2


@pytest.mark.asyncio
async def test_cached_token_replaced_after_rejection(private_key_pem):
    minted = 0
    revoked = {"tok-1"}

    def handler(request):
        nonlocal minted
        if request.url.host == "oauth2.googleapis.com":
            minted += 1
            return httpx.Response(200, json={"access_token": f"tok-{minted}"})
        token = request.headers["authorization"].removeprefix("Bearer ")
        if token in revoked:
            return httpx.Response(401, json={"error": {"code": 401}})
        return httpx.Response(200, json={"id": "f"})

    transport = httpx.MockTransport(handler)
    minter = TokenMinter(
        "bridge@project.iam.gserviceaccount.com", private_key_pem, transport=transport
    )
    drive = DriveClient(minter, transport=transport)

    await drive.rename_folder("f", "one")
    await drive.rename_folder("f", "two")

    assert minted == 2
