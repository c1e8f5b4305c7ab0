"""Service modules for medreport."""

from medreport.services.errors import (
    EmptyPayload,
    EmptyResponse,
    GenerationError,
    PayloadDecodeError,
    PayloadError,
    PreconditionUnmet,
    TransportFailure,
    UnfencedPayloadError,
)
from medreport.services.generation_client import GenerationClient, generation_client
from medreport.services.payload_extractor import decode_report, extract, isolate_payload
from medreport.services.retry_policy import RetryPolicy

__all__ = [
    "EmptyPayload",
    "EmptyResponse",
    "GenerationError",
    "PayloadDecodeError",
    "PayloadError",
    "PreconditionUnmet",
    "TransportFailure",
    "UnfencedPayloadError",
    "GenerationClient",
    "generation_client",
    "decode_report",
    "extract",
    "isolate_payload",
    "RetryPolicy",
]
