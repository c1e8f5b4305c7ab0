"""Pydantic models for the generated medical report.

The shape is fixed: every key is required, every leaf is a string and every list keeps
the order the model produced it in. A payload missing any substructure fails validation
as a whole.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class ReportSection(BaseModel):
    """Base for every report node."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class CoverLetter(ReportSection):
    patient_name: str
    date_of_birth: str
    gender: str
    consulting_doctor: str
    report_date: str
    letter_text: str


class Diagnosis(ReportSection):
    name: str
    explanation: str


class Diagnoses(ReportSection):
    main_diagnosis: Diagnosis
    comorbid_diagnoses: List[Diagnosis]


class ObjectiveStatus(ReportSection):
    """Vital signs and system findings, one free-text value per fixed key."""

    height: str
    weight: str
    bmi: str
    blood_pressure: str
    pulse: str
    spo2: str
    cardiovascular: str
    respiratory: str
    abdomen: str


class PhysicalExamination(ReportSection):
    complaints: str
    medical_history: str
    objective_status: ObjectiveStatus


class LaboratoryResult(ReportSection):
    test_group: str
    purpose: str
    results_summary: str
    interpretation: str


class InstrumentalExamination(ReportSection):
    exam_name: str
    conclusion: str
    explanation: str


class SpecialistConsultation(ReportSection):
    specialist: str
    diagnosis: str
    comments: str


class Medication(ReportSection):
    name: str
    purpose: str
    instructions: str
    duration: str


class TreatmentPlan(ReportSection):
    lifestyle_instructions: str
    medications: List[Medication]


class Recommendation(ReportSection):
    recommendation: str
    reason: str
    frequency: str


class DiagnosisSpecificRecommendation(Recommendation):
    diagnosis: str


class NutritionRecommendations(ReportSection):
    general: List[Recommendation]
    diagnosis_specific: List[DiagnosisSpecificRecommendation]


class Exercise(ReportSection):
    name: str
    benefits: str
    frequency: str
    duration: str
    precautions: str


class PhysicalActivity(ReportSection):
    general_activity: str
    exercises: List[Exercise]


class SleepHygiene(ReportSection):
    recommendation: str
    explanation: str


class ExpectedImprovement(ReportSection):
    condition: str
    expected_effect: str


class FollowUpPlan(ReportSection):
    specialist_visits: str
    additional_tests: str
    timing: str


class FinalConclusion(ReportSection):
    summary: str
    closing_message: str


class MedicalReport(ReportSection):
    """Complete patient-facing report decoded from the model reply."""

    cover_letter: CoverLetter
    diagnoses: Diagnoses
    physical_examination: PhysicalExamination
    laboratory_results: List[LaboratoryResult]
    instrumental_examinations: List[InstrumentalExamination]
    specialist_consultations: List[SpecialistConsultation]
    treatment_plan: TreatmentPlan
    nutrition_recommendations: NutritionRecommendations
    physical_activity: PhysicalActivity
    sleep_hygiene: List[SleepHygiene]
    expected_improvements: List[ExpectedImprovement]
    follow_up_plan: FollowUpPlan
    final_conclusion: FinalConclusion
