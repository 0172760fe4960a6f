"""Report generation for completed check-ins."""

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List

from ...core.utils.datetime_utils import current_millis
from ...domain.entities.analysis import AnalysisResult
from ...domain.entities.patient import PatientRecord
from ..ports.services.report_storage import ReportStorage

logger = logging.getLogger(__name__)


def report_key(patient_id: str, millis: int) -> str:
    return f"patient-report-{patient_id}-{millis}.txt"


class ReportGenerator:
    """Renders a patient + analysis report and stores it write-once."""

    def __init__(self, storage: ReportStorage, clock: Callable[[], int] = current_millis):
        self._storage = storage
        self._clock = clock
        self._last_millis: Dict[str, int] = {}

    def _next_millis(self, patient_id: str) -> int:
        # Timestamps issued for one patient strictly increase.
        now = self._clock()
        # Entries behind the clock can no longer collide.
        self._last_millis = {
            pid: last for pid, last in self._last_millis.items() if last >= now
        }
        last = self._last_millis.get(patient_id)
        issued = now if last is None else last + 1
        self._last_millis[patient_id] = issued
        return issued

    @property
    def pending_patients(self) -> int:
        """Patients whose last key is not yet behind the clock."""
        return len(self._last_millis)

    def render(self, patient: PatientRecord, analysis: AnalysisResult, millis: int) -> str:
        """Render the fixed text template."""
        generated_at = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
        conditions = ", ".join(sorted(patient.existing_conditions)) or "None reported"

        lines: List[str] = [
            "PATIENT CHECK-IN REPORT",
            "=======================",
            f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S UTC')}",
            "",
            f"Patient ID: {patient.id}",
            f"Name: {patient.full_name}",
            f"Date of Birth: {patient.date_of_birth}",
            f"Phone: {patient.phone}",
            f"Email: {patient.email or '-'}",
            f"Existing Conditions: {conditions}",
            "",
            "SYMPTOM ANALYSIS",
            "----------------",
            f"Specialty: {analysis.specialty.value.replace('_', ' ').title()}",
            f"Severity: {analysis.severity.value}",
            f"Triage Recommendation: {analysis.triage_recommendation}",
            "",
            "Possible Conditions:",
        ]
        lines.extend(f"  - {c.name}: {c.percent}%" for c in analysis.possible_conditions)
        lines.append("")
        lines.append("Recommended Actions:")
        lines.extend(
            f"  {i}. {action}" for i, action in enumerate(analysis.recommended_actions, start=1)
        )
        if analysis.doctor_notes:
            lines.extend(["", "Doctor Notes:", f"  {analysis.doctor_notes}"])
        lines.append("")
        return "\n".join(lines)

    async def generate(self, patient: PatientRecord, analysis: AnalysisResult) -> str:
        """Render and upload the report; returns the artifact key.

        Raises StoreError if the upload is rejected.
        """
        millis = self._next_millis(patient.id)
        key = report_key(patient.id, millis)
        text = self.render(patient, analysis, millis)
        stored_key = await self._storage.upload_text(key, text)
        logger.info(f"Report stored: key={stored_key} patient_id={patient.id}")
        return stored_key
