"""Static prompt text for report generation."""

import json

from medreport.models.report import MedicalReport

_REPORT_SCHEMA = json.dumps(MedicalReport.model_json_schema(), ensure_ascii=False)

SYSTEM_INSTRUCTION = f"""You are an experienced internal medicine physician writing a comprehensive,
patient-friendly medical consultation report from check-up documents.

RULES:
- Use ONLY the facts contained in the input data and the doctor's notes; never invent results.
- Explain every diagnosis, result, and recommendation in plain language a patient understands.
- Keep every list in clinically meaningful order (most important first).
- If a section has no supporting data, return an empty list or a short statement saying so.
- Every value is a string. Do not use numbers, booleans, or null.
- Answer with a single JSON object and nothing else.

The JSON object MUST follow this JSON Schema exactly, with every key present:
{_REPORT_SCHEMA}
"""

# Simulated OCR output of the uploaded check-up document. No file content is read.
DOCUMENT_TEXT = """CHECK-UP SUMMARY
Patient: Ivanova Maria Petrovna   DOB: 14.03.1971   Sex: female
Date of examination: 02.09.2024   Physician: Dr. A. S. Sokolov

COMPLAINTS: periodic headaches in the morning, fatigue in the afternoon,
occasional heartburn after large meals.
HISTORY: arterial hypertension for 6 years, irregular intake of amlodipine 5 mg.
Father: myocardial infarction at 62.

OBJECTIVE STATUS: height 165 cm, weight 82 kg, BMI 30.1 kg/m2, BP 148/94 mmHg,
pulse 78 bpm regular, SpO2 98%. Heart sounds rhythmic, no murmurs. Vesicular breathing,
no rales. Abdomen soft, mild epigastric tenderness.

LABORATORY:
Complete blood count: Hb 131 g/L, WBC 6.2, PLT 254 - within reference ranges.
Lipid profile: total cholesterol 6.4 mmol/L (H), LDL 4.1 mmol/L (H), HDL 1.1 mmol/L,
TG 2.0 mmol/L (H).
Glucose metabolism: fasting glucose 6.3 mmol/L (H), HbA1c 6.0% (H).
Biochemistry: ALT 38 U/L, AST 31 U/L, creatinine 78 umol/L, eGFR 79, uric acid 380 umol/L.
Thyroid: TSH 2.1 mIU/L.
Vitamin D (25-OH): 18 ng/mL (L).

INSTRUMENTAL:
ECG: sinus rhythm 76 bpm, signs of left ventricular hypertrophy.
Echocardiography: LV wall thickness 11-12 mm, EF 62%, diastolic dysfunction type 1.
Abdominal ultrasound: diffuse liver changes consistent with steatosis.
Gastroscopy: superficial gastritis, H. pylori rapid test negative.

CONSULTATIONS:
Cardiologist: hypertension stage 2, risk 3; adjust antihypertensive therapy.
Gastroenterologist: non-alcoholic fatty liver disease; chronic gastritis, remission.
Ophthalmologist: angiopathy of retinal vessels of hypertensive type.
"""


def build_prompt(document_text: str, notes: str) -> str:
    """Combine the document text and the doctor's free-form notes into one prompt."""
    return f"""
INPUT DATA:
{document_text}

---
ADDITIONAL NOTES FROM DOCTOR:
{notes}
---
"""
