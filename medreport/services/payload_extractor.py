"""
Deterministic extraction of the JSON payload embedded in a model reply.

A reply is either the bare JSON document or the same document wrapped in a
```json fence. Isolation yields a tagged value so both paths can be exercised on
their own; decoding is strict ``json`` with non-finite constants rejected.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from medreport.models.report import MedicalReport
from medreport.services.errors import (
    EmptyPayload,
    PayloadDecodeError,
    UnfencedPayloadError,
)
from medreport.utils.logging import get_logger

logger = get_logger(__name__)

_FENCE_PATTERN = re.compile(r"```json[ \t]*\r?\n(.*?)\r?\n[ \t]*```", re.DOTALL)


@dataclass(frozen=True)
class FencedPayload:
    inner: str


@dataclass(frozen=True)
class BarePayload:
    text: str


Payload = Union[FencedPayload, BarePayload]


def isolate_payload(raw_text: str) -> Payload:
    """Return the first fenced JSON block, or the whole text when there is none."""

    match = _FENCE_PATTERN.search(raw_text)
    if match:
        return FencedPayload(inner=match.group(1))
    return BarePayload(text=raw_text)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name!r}")


def _decode(text: str) -> Dict[str, Any]:
    value = json.loads(text, parse_constant=_reject_constant)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def extract(raw_text: Optional[str]) -> Dict[str, Any]:
    """Isolate and decode the structured record carried by ``raw_text``.

    Raises:
        EmptyPayload: ``raw_text`` is empty or missing.
        PayloadDecodeError: the fenced payload is not a well-formed JSON object.
        UnfencedPayloadError: no fence was found and the bare text is not one either.
    """

    if not raw_text:
        raise EmptyPayload()

    payload = isolate_payload(raw_text)
    if isinstance(payload, FencedPayload):
        try:
            return _decode(payload.inner)
        except ValueError as exc:
            logger.error("Failed to decode fenced JSON payload: %s", exc)
            raise PayloadDecodeError(f"Fenced payload is not valid JSON: {exc}") from exc

    try:
        return _decode(payload.text)
    except ValueError as exc:
        logger.error(
            "Reply has no JSON fence and is not valid JSON",
            extra={"extra_fields": {"reply_length": len(payload.text)}},
        )
        raise UnfencedPayloadError(f"Reply is not valid JSON: {exc}") from exc


def decode_report(raw_text: Optional[str]) -> MedicalReport:
    """Extract the payload and validate it against the fixed report shape."""

    record = extract(raw_text)
    try:
        return MedicalReport.model_validate(record)
    except ValidationError as exc:
        logger.error(
            "Decoded payload does not match the report shape",
            extra={"extra_fields": {"error_count": exc.error_count()}},
        )
        raise PayloadDecodeError(f"Payload does not match the report shape: {exc}") from exc
