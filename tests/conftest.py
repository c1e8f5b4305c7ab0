"""Shared fixtures for medreport tests."""

import os

# Settings are built on import and require the credential.
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("ENABLE_STRUCTURED_LOGGING", "false")

import copy
import json
from unittest.mock import MagicMock

import httpx
import pytest

REPORT_PAYLOAD = {
    "cover_letter": {
        "patient_name": "Ivanova Maria Petrovna",
        "date_of_birth": "14.03.1971",
        "gender": "female",
        "consulting_doctor": "Dr. A. S. Sokolov",
        "report_date": "02.09.2024",
        "letter_text": "Dear Maria Petrovna, here is a summary of your check-up.",
    },
    "diagnoses": {
        "main_diagnosis": {
            "name": "Arterial hypertension, stage 2",
            "explanation": "Blood pressure is persistently above target.",
        },
        "comorbid_diagnoses": [
            {"name": "Prediabetes", "explanation": "Fasting glucose 6.3 mmol/L."},
            {"name": "Dyslipidemia", "explanation": "LDL 4.1 mmol/L."},
        ],
    },
    "physical_examination": {
        "complaints": "Morning headaches, afternoon fatigue.",
        "medical_history": "Hypertension for 6 years.",
        "objective_status": {
            "height": "165 cm",
            "weight": "82 kg",
            "bmi": "30.1",
            "blood_pressure": "148/94 mmHg",
            "pulse": "78 bpm",
            "spo2": "98%",
            "cardiovascular": "Rhythmic heart sounds, no murmurs.",
            "respiratory": "Vesicular breathing.",
            "abdomen": "Soft, mild epigastric tenderness.",
        },
    },
    "laboratory_results": [
        {
            "test_group": "Lipid profile",
            "purpose": "Cardiovascular risk",
            "results_summary": "Total cholesterol 6.4, LDL 4.1",
            "interpretation": "Elevated",
        },
        {
            "test_group": "Glucose metabolism",
            "purpose": "Diabetes screening",
            "results_summary": "HbA1c 6.0%",
            "interpretation": "Prediabetes range",
        },
    ],
    "instrumental_examinations": [
        {
            "exam_name": "ECG",
            "conclusion": "Sinus rhythm, LV hypertrophy signs",
            "explanation": "The heart muscle has thickened under high pressure.",
        }
    ],
    "specialist_consultations": [
        {
            "specialist": "Cardiologist",
            "diagnosis": "Hypertension stage 2, risk 3",
            "comments": "Adjust antihypertensive therapy.",
        }
    ],
    "treatment_plan": {
        "lifestyle_instructions": "Reduce salt, lose 5-7% body weight.",
        "medications": [
            {
                "name": "Amlodipine",
                "purpose": "Blood pressure control",
                "instructions": "5 mg every morning",
                "duration": "Long-term",
            }
        ],
    },
    "nutrition_recommendations": {
        "general": [
            {
                "recommendation": "Mediterranean diet",
                "reason": "Lowers cardiovascular risk",
                "frequency": "Daily",
            }
        ],
        "diagnosis_specific": [
            {
                "diagnosis": "Prediabetes",
                "recommendation": "Limit simple sugars",
                "reason": "Improves glucose control",
                "frequency": "Daily",
            }
        ],
    },
    "physical_activity": {
        "general_activity": "150 minutes of moderate activity per week.",
        "exercises": [
            {
                "name": "Brisk walking",
                "benefits": "Lowers blood pressure",
                "frequency": "5 times a week",
                "duration": "30 minutes",
                "precautions": "Stop if chest pain occurs",
            }
        ],
    },
    "sleep_hygiene": [
        {"recommendation": "Fixed bedtime", "explanation": "Stabilises the circadian rhythm."}
    ],
    "expected_improvements": [
        {"condition": "Blood pressure", "expected_effect": "Below 130/80 within 3 months."}
    ],
    "follow_up_plan": {
        "specialist_visits": "Cardiologist in 1 month",
        "additional_tests": "Lipid profile in 3 months",
        "timing": "September - December 2024",
    },
    "final_conclusion": {
        "summary": "Manageable cardiometabolic risk.",
        "closing_message": "Wishing you good health.",
    },
}


@pytest.fixture
def report_payload():
    """A well-formed report document as decoded JSON."""
    return copy.deepcopy(REPORT_PAYLOAD)


@pytest.fixture
def report_json(report_payload):
    return json.dumps(report_payload, ensure_ascii=False)


@pytest.fixture
def medical_report(report_payload):
    from medreport.models.report import MedicalReport

    return MedicalReport.model_validate(report_payload)


def gemini_response(text, finish_reason="STOP"):
    """Mock httpx response carrying ``text`` as the first candidate's reply."""
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = {
        "candidates": [
            {
                "content": {"role": "model", "parts": [{"text": text}]},
                "finishReason": finish_reason,
            }
        ]
    }
    return response


def gemini_envelope(envelope):
    response = MagicMock()
    response.raise_for_status.return_value = None
    response.json.return_value = envelope
    return response


def gemini_status_error(status_code):
    """Mock httpx response whose raise_for_status fails with ``status_code``."""
    request = httpx.Request("POST", "https://example.invalid/generateContent")
    error = httpx.HTTPStatusError(
        f"{status_code} error",
        request=request,
        response=httpx.Response(status_code, request=request),
    )
    response = MagicMock()
    response.raise_for_status.side_effect = error
    return response, error


@pytest.fixture
def gemini():
    """Factories for mocked Gemini replies."""

    class _Factories:
        response = staticmethod(gemini_response)
        envelope = staticmethod(gemini_envelope)
        status_error = staticmethod(gemini_status_error)

    return _Factories
