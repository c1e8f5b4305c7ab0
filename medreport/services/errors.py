"""Failure taxonomy for report generation."""

from typing import Optional


class GenerationError(Exception):
    """Base class for every failure surfaced by the generation client."""

    retryable = False


class TransportFailure(GenerationError):
    """The remote call itself failed (network, auth, or service error)."""

    retryable = True

    def __init__(self, cause: BaseException):
        super().__init__(f"Remote generation call failed: {cause}")
        self.cause = cause


class EmptyResponse(GenerationError):
    """The call succeeded but the envelope carried no text."""

    retryable = True

    def __init__(self, reason: Optional[str] = None):
        message = "API returned an empty or invalid response."
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.reason = reason


class PayloadError(GenerationError):
    """The reply text could not be turned into a report."""


class EmptyPayload(PayloadError):
    def __init__(self):
        super().__init__("Reply text is empty; nothing to extract.")


class PayloadDecodeError(PayloadError):
    """The isolated payload is not well-formed or does not match the report shape."""

    fenced = True


class UnfencedPayloadError(PayloadDecodeError):
    """No JSON fence was found and the bare reply text did not decode either."""

    fenced = False


class PreconditionUnmet(GenerationError):
    """A submission was attempted without its required input."""
