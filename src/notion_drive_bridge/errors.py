"""Error taxonomy for the bridge.

Each error maps to one failure surface: request parsing, signature checks,
Google token minting, Drive REST calls and Notion reads/writes.
"""


class BridgeError(Exception):
    """Base class for all bridge failures."""

    def __init__(self, message: str, *, retryable: bool = False) -> None:
        self.retryable = retryable
        super().__init__(message)


class MalformedRequest(BridgeError):
    """Raised when a webhook body is not JSON or matches no accepted shape."""


class SignatureError(BridgeError):
    """Raised when the webhook signature header is missing or wrong."""


class AuthError(BridgeError):
    """Raised when a Drive access token cannot be minted."""


class GatewayError(BridgeError):
    """Raised on a non-success response from the Drive API."""

    def __init__(
        self, message: str, *, status_code: int | None = None, retryable: bool = False
    ) -> None:
        self.status_code = status_code
        super().__init__(message, retryable=retryable)


class RecordStoreError(BridgeError):
    """Raised when a Notion page cannot be read or updated."""
