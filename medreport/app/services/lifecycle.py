"""
Request lifecycle for report generation.

``transition`` is a pure function from (state, event) to the next state plus the
effects to run. ``ReportSession`` owns one state record and a generation client and
executes those effects one at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from medreport.app.models.session import LifecycleState, LifecycleStep
from medreport.models.report import MedicalReport
from medreport.services.errors import PreconditionUnmet
from medreport.services.generation_client import GenerationClient, generation_client
from medreport.services.prompts import DOCUMENT_TEXT, build_prompt
from medreport.utils.logging import get_logger

logger = get_logger(__name__)

MISSING_DOCUMENT_MESSAGE = 'Please "upload" a medical document first.'
FAILURE_PREFIX = "Failed to generate report."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
CANCELLED_MESSAGE = "The request was cancelled."


@dataclass(frozen=True)
class AttachDocument:
    document_name: str


@dataclass(frozen=True)
class UpdateNotes:
    notes: str


@dataclass(frozen=True)
class Submit:
    document_text: str


@dataclass(frozen=True)
class GenerationSucceeded:
    report: MedicalReport


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[AttachDocument, UpdateNotes, Submit, GenerationSucceeded, GenerationFailed, Reset]


@dataclass(frozen=True)
class IssueGeneration:
    """Effect: call ``GenerationClient.generate`` with ``prompt``."""

    prompt: str


@dataclass(frozen=True)
class Transition:
    state: LifecycleState
    effects: Tuple[IssueGeneration, ...] = ()


def _check_submittable(state: LifecycleState) -> None:
    if not (state.document_name and state.document_name.strip()):
        raise PreconditionUnmet(MISSING_DOCUMENT_MESSAGE)


def transition(state: LifecycleState, event: Event) -> Transition:
    """Compute the next lifecycle state. Events not valid in ``state.step`` are ignored."""

    step = state.step

    if isinstance(event, Reset):
        if step == LifecycleStep.LOADING:
            # requests cannot be cancelled; the in-flight call must finish first
            return Transition(state)
        return Transition(LifecycleState())

    if isinstance(event, AttachDocument):
        if step != LifecycleStep.INPUT:
            return Transition(state)
        return Transition(state.model_copy(update={"document_name": event.document_name}))

    if isinstance(event, UpdateNotes):
        if step != LifecycleStep.INPUT:
            return Transition(state)
        return Transition(state.model_copy(update={"notes": event.notes}))

    if isinstance(event, Submit):
        if step != LifecycleStep.INPUT:
            return Transition(state)
        try:
            _check_submittable(state)
        except PreconditionUnmet as exc:
            return Transition(state.model_copy(update={"error": str(exc)}))
        loading = state.model_copy(
            update={"step": LifecycleStep.LOADING, "error": None, "report": None}
        )
        prompt = build_prompt(event.document_text, state.notes)
        return Transition(loading, (IssueGeneration(prompt),))

    if isinstance(event, GenerationSucceeded):
        if step != LifecycleStep.LOADING:
            return Transition(state)
        return Transition(
            state.model_copy(
                update={"step": LifecycleStep.REPORT, "report": event.report, "error": None}
            )
        )

    if isinstance(event, GenerationFailed):
        if step != LifecycleStep.LOADING:
            return Transition(state)
        return Transition(
            state.model_copy(
                update={
                    "step": LifecycleStep.INPUT,
                    "report": None,
                    "error": f"{FAILURE_PREFIX} {event.message}",
                }
            )
        )

    raise TypeError(f"Unknown lifecycle event: {event!r}")


class ReportSession:
    """Single-operator report session driving the lifecycle against a client."""

    def __init__(
        self,
        client: GenerationClient = generation_client,
        document_text: str = DOCUMENT_TEXT,
    ):
        self._client = client
        self._document_text = document_text
        self._state = LifecycleState()

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return self._client.is_generating

    def dispatch(self, event: Event) -> Transition:
        result = transition(self._state, event)
        if result.state.step != self._state.step:
            logger.info(
                "Lifecycle transition",
                extra={
                    "extra_fields": {
                        "event": type(event).__name__,
                        "from_step": self._state.step.value,
                        "to_step": result.state.step.value,
                    }
                },
            )
        self._state = result.state
        return result

    def attach_document(self, document_name: str) -> LifecycleState:
        return self.dispatch(AttachDocument(document_name)).state

    def update_notes(self, notes: str) -> LifecycleState:
        return self.dispatch(UpdateNotes(notes)).state

    def reset(self) -> LifecycleState:
        return self.dispatch(Reset()).state

    async def submit(self) -> LifecycleState:
        """Submit the attached document and notes; returns the settled state."""

        if self.is_generating:
            logger.warning("Submit ignored while a generation is in flight")
            return self._state

        result = self.dispatch(Submit(self._document_text))
        if not result.effects:
            logger.warning(f"Submit issued no generation: {result.state.error}")
        for effect in result.effects:
            await self._run(effect)
        return self._state

    async def _run(self, effect: IssueGeneration) -> None:
        settled = False
        try:
            report = await self._client.generate(effect.prompt)
        except Exception as exc:
            logger.error(f"Report generation failed: {exc}", exc_info=True)
            self.dispatch(GenerationFailed(str(exc) or UNKNOWN_ERROR_MESSAGE))
            settled = True
        else:
            self.dispatch(GenerationSucceeded(report))
            settled = True
        finally:
            # cancellation and other BaseExceptions must not leave the session in loading
            if not settled:
                logger.warning("Report generation was interrupted before it settled")
                self.dispatch(GenerationFailed(CANCELLED_MESSAGE))


report_session = ReportSession()
