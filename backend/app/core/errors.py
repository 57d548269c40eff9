"""Error taxonomy shared by the pipeline, the adapters and the HTTP layer."""

from __future__ import annotations


class HarvestError(Exception):
    """Base class for all caller-visible failures."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message}


class BadRequestError(HarvestError):
    status_code = 400


class NoFileError(BadRequestError):
    pass


class NoTextDetectedError(BadRequestError):
    pass


class ParseFailureError(HarvestError):
    """Model output could not be parsed; carries a reply excerpt."""

    status_code = 400

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw[:500]

    def to_payload(self) -> dict[str, str]:
        return {"error": self.message, "raw": self.raw}


class UpstreamError(HarvestError):
    """Network failure or non-2xx reply from an external HTTP service."""

    status_code = 500


class NotFoundError(HarvestError):
    status_code = 404


class StoreWriteError(HarvestError):
    status_code = 500
