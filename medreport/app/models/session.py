"""Pydantic models for the report request lifecycle and its HTTP surface."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from medreport.models.report import MedicalReport


class LifecycleStep(str, Enum):
    """UI-visible phase of a report request."""

    INPUT = "input"
    LOADING = "loading"
    REPORT = "report"


class LifecycleState(BaseModel):
    """Complete lifecycle state; a fresh instance is the reset state."""

    model_config = ConfigDict(frozen=True)

    step: LifecycleStep = LifecycleStep.INPUT
    document_name: Optional[str] = None
    notes: str = ""
    report: Optional[MedicalReport] = None
    error: Optional[str] = None


class AttachDocumentRequest(BaseModel):
    """Metadata of the selected document; its content is never read."""

    document_name: str = Field(..., description="Name of the selected file")


class NotesRequest(BaseModel):
    notes: str = Field("", description="Free-form notes from the doctor")


class GenerateRequest(BaseModel):
    """Request body for one-shot generation from a ready prompt."""

    prompt: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    state: LifecycleState
    is_generating: bool
