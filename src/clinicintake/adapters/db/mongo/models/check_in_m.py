"""
MongoDB Beanie models for check-ins, the symptom vocabulary, symptom links
and analysis results.
"""

from datetime import datetime
from typing import List, Optional

from beanie import Document
from pydantic import BaseModel, Field

from .....core.utils import generate_id, get_current_timestamp
from .....domain.entities.analysis import AnalysisResult
from .....domain.entities.check_in import CheckInRecord, SymptomTag
from .....domain.enums.clinical import Severity, Specialty, UrgencyTier


class CheckInMongo(Document):
    """MongoDB model for one visit."""

    id: str = Field(default_factory=generate_id, description="Check-in ID")
    patient_id: str = Field(..., description="Patient ID reference")
    symptoms_description: str = Field(..., description="Free-text symptom description")
    urgency: UrgencyTier = Field(default=UrgencyTier.REGULAR)
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "check_ins"

    def to_record(self) -> CheckInRecord:
        return CheckInRecord(
            check_in_id=self.id,
            patient_id=self.patient_id,
            description=self.symptoms_description,
            urgency=self.urgency,
            created_at=self.created_at,
        )


class SymptomMongo(Document):
    """Symptom vocabulary entry."""

    id: str = Field(..., description="Symptom ID")
    name: str = Field(..., description="Lower-case symptom name")

    class Settings:
        name = "symptoms"

    def to_tag(self) -> SymptomTag:
        return SymptomTag(symptom_id=self.id, name=self.name)


class CheckInSymptomMongo(Document):
    """Link between a check-in and a matched symptom."""

    id: str = Field(..., description="'{check_in_id}:{symptom_id}'")
    check_in_id: str = Field(..., description="Check-in ID reference")
    symptom_id: str = Field(..., description="Symptom ID reference")

    class Settings:
        name = "check_in_symptoms"


class ConditionLikelihoodMongo(BaseModel):
    """Embedded candidate condition."""

    name: str
    probability: float = Field(..., ge=0.0, le=1.0)


class AnalysisResultMongo(Document):
    """Stored analysis of one check-in."""

    id: str = Field(default_factory=generate_id, description="Analysis ID")
    check_in_id: str = Field(..., description="Check-in ID reference")
    specialty: Specialty
    possible_conditions: List[ConditionLikelihoodMongo] = Field(default_factory=list)
    recommended_actions: List[str] = Field(default_factory=list)
    severity: Severity
    triage_recommendation: str
    doctor_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=get_current_timestamp)

    class Settings:
        name = "analysis_results"

    @classmethod
    def from_analysis(cls, check_in_id: str, analysis: AnalysisResult) -> "AnalysisResultMongo":
        return cls(check_in_id=check_in_id, **analysis.to_document())

    def to_result(self) -> AnalysisResult:
        return AnalysisResult.from_document(
            self.model_dump(
                mode="json",
                include={
                    "specialty",
                    "possible_conditions",
                    "recommended_actions",
                    "severity",
                    "triage_recommendation",
                    "doctor_notes",
                },
            )
        )
