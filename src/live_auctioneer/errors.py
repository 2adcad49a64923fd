"""Error taxonomy shared by the server handlers and the page client."""


class LiveAuctioneerError(Exception):
    """Base error rendered to clients as ``{"error": message, "code": code}``."""

    status_code = 500
    code = "internal_error"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.message, "code": self.code}


class ConfigurationError(LiveAuctioneerError):
    """Vendor credential is missing; only an operator can fix it."""

    status_code = 500
    code = "configuration_error"
    default_message = "D-ID API key not configured"


class ValidationError(LiveAuctioneerError):
    """Request fields missing or malformed; never forwarded to the vendor."""

    status_code = 400
    code = "validation_error"
    default_message = "Missing required parameters"


class InvalidInput(ValidationError):
    """Uploaded asset rejected by type or size."""


class VendorRejected(LiveAuctioneerError):
    """Vendor answered with a non-success status."""

    code = "vendor_rejected"
    default_message = "Vendor request failed"

    def __init__(self, status_code: int, message: str | None = None) -> None:
        super().__init__(message, status_code=status_code)


class TransportError(LiveAuctioneerError):
    """Network or decoding failure while talking to the vendor."""

    status_code = 500
    code = "transport_error"
    default_message = "Internal server error"


class PollingFailure(LiveAuctioneerError):
    """A status poll errored; the poll loop stops."""

    status_code = 500
    code = "polling_failure"
    default_message = "Failed to check video status"


ERRORS_BY_CODE: dict[str, type[LiveAuctioneerError]] = {
    cls.code: cls
    for cls in (
        ConfigurationError,
        ValidationError,
        VendorRejected,
        TransportError,
        PollingFailure,
    )
}


def error_from_payload(status_code: int, payload: dict) -> LiveAuctioneerError:
    """Rebuild a taxonomy error from a server JSON error body."""
    message = payload.get("error") if isinstance(payload, dict) else None
    code = payload.get("code") if isinstance(payload, dict) else None
    cls = ERRORS_BY_CODE.get(code or "")
    if cls is VendorRejected:
        return VendorRejected(status_code, message)
    if cls is None:
        if 400 <= status_code < 500:
            return ValidationError(message, status_code=status_code)
        return LiveAuctioneerError(message, status_code=status_code)
    return cls(message, status_code=status_code)
