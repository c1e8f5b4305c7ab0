"""Model modules for the medreport app layer."""

from medreport.app.models.session import (
    AttachDocumentRequest,
    GenerateRequest,
    LifecycleState,
    LifecycleStep,
    NotesRequest,
    SessionResponse,
)

__all__ = [
    "AttachDocumentRequest",
    "GenerateRequest",
    "LifecycleState",
    "LifecycleStep",
    "NotesRequest",
    "SessionResponse",
]
