"""Model modules for medreport."""

from medreport.models.generation import (
    AttemptOutcome,
    GenerationAttempt,
    GenerationRequest,
    HarmBlockThreshold,
    HarmCategory,
    SafetySetting,
    SamplingConfig,
)
from medreport.models.report import MedicalReport

__all__ = [
    "AttemptOutcome",
    "GenerationAttempt",
    "GenerationRequest",
    "HarmBlockThreshold",
    "HarmCategory",
    "SafetySetting",
    "SamplingConfig",
    "MedicalReport",
]
