"""Error taxonomy for the relay.

Every failure the relay can report is a :class:`RelayError`.  The API layer
registers a single exception handler that turns any of them into a JSON body
of the form ``{"error": ..., "details": ...}`` with the carried status code,
so no failure path ever crashes the process.

========================  ======  ==========================================
Error                     Status  Raised when
========================  ======  ==========================================
MissingParameter          400     Client request lacks a required field
InvalidParameter          400     Client value unsafe to forward (bad job id)
VendorError               vendor  Vendor returned non-2xx or transport broke
UnexpectedResponseShape   500/404 Vendor 2xx body matched no known layout
IncompleteResult          404     ``COMPLETE`` without any usable image URL
GenerationFailed          500     Vendor reported ``FAILED`` for the job
========================  ======  ==========================================
"""

from __future__ import annotations

from typing import Any


class RelayError(Exception):
    """Base class for every error converted into an HTTP response."""

    status_code: int = 500
    error: str = "Relay error"

    def __init__(
        self,
        details: Any = None,
        *,
        error: str | None = None,
        status_code: int | None = None,
    ) -> None:
        if error is not None:
            self.error = error
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        super().__init__(f"{self.error}: {details}" if details is not None else self.error)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body sent to the client."""
        return {"error": self.error, "details": self.details}


class MissingParameter(RelayError):
    """Client request is missing one or more required fields."""

    status_code = 400
    error = "Missing required parameters"

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"Required: {', '.join(self.missing)}")


class InvalidParameter(RelayError):
    """Client supplied a value the relay refuses to forward."""

    status_code = 400
    error = "Invalid parameter"


class VendorError(RelayError):
    """The vendor API answered with a non-2xx status or could not be reached.

    ``status_code`` is the vendor's own status, relayed unchanged; transport
    failures have no vendor status and fall back to 500.
    """

    error = "Vendor request failed"


class UnexpectedResponseShape(RelayError):
    """A 2xx vendor body did not match any layout the relay understands."""

    error = "Unexpected response shape"


class IncompleteResult(RelayError):
    """The vendor reported completion but returned no usable image URL."""

    status_code = 404
    error = "COMPLETE_NO_VALID_URLS"


class GenerationFailed(RelayError):
    """The vendor reported the job as failed."""

    error = "Generation failed"

    def to_dict(self) -> dict[str, Any]:
        return {"status": "FAILED", "error": self.error, "details": self.details}
