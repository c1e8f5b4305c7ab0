"""REST router for report generation and the request lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import HTMLResponse

from medreport.app.models.session import (
    AttachDocumentRequest,
    GenerateRequest,
    LifecycleStep,
    NotesRequest,
    SessionResponse,
)
from medreport.app.services.lifecycle import ReportSession, report_session
from medreport.app.services.report_renderer import render_report_html
from medreport.models.report import MedicalReport
from medreport.services.errors import EmptyResponse, PayloadError, TransportFailure
from medreport.services.generation_client import GenerationClient, generation_client
from medreport.utils.logging import get_logger

router = APIRouter(prefix="/api/reports", tags=["reports"])
logger = get_logger(__name__)


def get_report_session() -> ReportSession:
    return report_session


def get_generation_client() -> GenerationClient:
    return generation_client


def _session_response(session: ReportSession) -> SessionResponse:
    return SessionResponse(state=session.state, is_generating=session.is_generating)


@router.get("/session", response_model=SessionResponse)
async def read_session(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    """Return the current lifecycle state and busy indicator."""

    return _session_response(session)


@router.post("/session/document", response_model=SessionResponse)
async def attach_document(
    payload: AttachDocumentRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionResponse:
    session.attach_document(payload.document_name)
    return _session_response(session)


@router.post("/session/notes", response_model=SessionResponse)
async def update_notes(
    payload: NotesRequest,
    session: ReportSession = Depends(get_report_session),
) -> SessionResponse:
    session.update_notes(payload.notes)
    return _session_response(session)


@router.post("/session/submit", response_model=SessionResponse)
async def submit_session(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    """Run one generation for the attached document and return the settled state."""

    if session.is_generating or session.state.step == LifecycleStep.LOADING:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A report is already being generated.",
        )
    await session.submit()
    return _session_response(session)


@router.post("/session/reset", response_model=SessionResponse)
async def reset_session(session: ReportSession = Depends(get_report_session)) -> SessionResponse:
    session.reset()
    return _session_response(session)


@router.get("/session/report.html", response_class=HTMLResponse)
async def read_session_report(
    session: ReportSession = Depends(get_report_session),
) -> HTMLResponse:
    """Render the finished report section by section."""

    state = session.state
    if state.step != LifecycleStep.REPORT or state.report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No report has been generated yet.",
        )
    return HTMLResponse(render_report_html(state.report))


@router.post("/generate", response_model=MedicalReport)
async def generate_report(
    payload: GenerateRequest,
    client: GenerationClient = Depends(get_generation_client),
) -> MedicalReport:
    """Generate a report directly from a ready prompt."""

    if client.is_generating:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A report is already being generated.",
        )
    try:
        return await client.generate(payload.prompt)
    except PayloadError as exc:
        logger.error("Generated reply could not be decoded: %s", exc)
        raise HTTPException(
            status_code=422,
            detail=f"Failed to generate report. {exc}",
        ) from exc
    except (TransportFailure, EmptyResponse) as exc:
        logger.error("Report generation unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to generate report. {exc}",
        ) from exc
