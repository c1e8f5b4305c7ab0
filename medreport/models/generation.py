"""Request and attempt models for calls to the Gemini generateContent endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from medreport.utils.config import ModelConfig


class HarmCategory(str, Enum):
    """Harm categories accepted by the safety settings of the service."""

    HARASSMENT = "HARM_CATEGORY_HARASSMENT"
    HATE_SPEECH = "HARM_CATEGORY_HATE_SPEECH"
    SEXUALLY_EXPLICIT = "HARM_CATEGORY_SEXUALLY_EXPLICIT"
    DANGEROUS_CONTENT = "HARM_CATEGORY_DANGEROUS_CONTENT"


class HarmBlockThreshold(str, Enum):
    """Blocking thresholds, loosest first."""

    BLOCK_NONE = "BLOCK_NONE"
    BLOCK_ONLY_HIGH = "BLOCK_ONLY_HIGH"
    BLOCK_MEDIUM_AND_ABOVE = "BLOCK_MEDIUM_AND_ABOVE"
    BLOCK_LOW_AND_ABOVE = "BLOCK_LOW_AND_ABOVE"


class SafetySetting(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: HarmCategory
    threshold: HarmBlockThreshold


def relaxed_safety_settings() -> List[SafetySetting]:
    """One BLOCK_NONE entry per harm category.

    Clinical text trips the default filters and a filtered reply would corrupt the report.
    """
    return [
        SafetySetting(category=category, threshold=HarmBlockThreshold.BLOCK_NONE)
        for category in HarmCategory
    ]


class SamplingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: float = ModelConfig.TEMPERATURE
    top_p: float = ModelConfig.TOP_P


class GenerationRequest(BaseModel):
    """Immutable description of a single generateContent call."""

    model_config = ConfigDict(frozen=True)

    prompt_text: str
    system_instruction: str
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    response_mime_type: str = ModelConfig.RESPONSE_MIME_TYPE
    safety_settings: List[SafetySetting] = Field(default_factory=relaxed_safety_settings)
    search_grounding: bool = False

    def to_payload(self) -> Dict[str, Any]:
        """Render the request body expected by ``models/{model}:generateContent``."""
        payload: Dict[str, Any] = {
            "contents": [
                {
                    "role": ModelConfig.USER_ROLE,
                    "parts": [{"text": self.prompt_text}],
                }
            ],
            "systemInstruction": {
                "role": ModelConfig.SYSTEM_ROLE,
                "parts": [{"text": self.system_instruction}],
            },
            "generationConfig": {
                "temperature": self.sampling.temperature,
                "topP": self.sampling.top_p,
                "responseMimeType": self.response_mime_type,
            },
            "safetySettings": [
                {"category": s.category.value, "threshold": s.threshold.value}
                for s in self.safety_settings
            ],
        }
        if self.search_grounding:
            payload["tools"] = [{"googleSearch": {}}]
        return payload


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    TRANSPORT_FAILURE = "transport_failure"
    EMPTY_RESPONSE = "empty_response"
    DECODE_ERROR = "decode_error"


@dataclass(frozen=True)
class GenerationAttempt:
    """Record of one pass through the retry loop."""

    attempt_index: int
    started_at: float
    outcome: AttemptOutcome
    detail: Optional[str] = None
