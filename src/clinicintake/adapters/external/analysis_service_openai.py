"""
Azure OpenAI implementation of SymptomAnalysisService.
"""

import json
import logging
from typing import Optional

from openai import AsyncAzureOpenAI, OpenAIError

from ...application.ports.services.analysis_service import SymptomAnalysisService
from ...core.config import AnalysisSettings, AzureOpenAISettings
from ...core.exceptions import ConfigurationError, ExternalServiceError
from ...domain.entities.analysis import AnalysisResult
from ...domain.enums.clinical import Severity, Specialty
from ...domain.errors import IntakeValidationError

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a clinical intake triage assistant. Classify the patient's symptom "
    "description. Reply with a single JSON object with the keys: "
    "specialty (one of: {specialties}), "
    "possible_conditions (list of {{\"name\": str, \"probability\": number in [0, 1]}}), "
    "recommended_actions (list of short strings), "
    "severity (one of: {severities}), "
    "triage_recommendation (short string), "
    "doctor_notes (short string or null). "
    "Do not give a diagnosis; this is for routing only."
)


class OpenAISymptomAnalysisService(SymptomAnalysisService):
    """Asks an Azure OpenAI chat deployment for a JSON analysis."""

    def __init__(
        self,
        openai_settings: AzureOpenAISettings,
        analysis_settings: AnalysisSettings,
        client: Optional[AsyncAzureOpenAI] = None,
    ):
        if client is None:
            if not openai_settings.endpoint or not openai_settings.api_key:
                raise ConfigurationError(
                    "Azure OpenAI endpoint and API key are required for ANALYSIS_PROVIDER=azure_openai"
                )
            client = AsyncAzureOpenAI(
                azure_endpoint=openai_settings.endpoint,
                api_key=openai_settings.api_key,
                api_version=openai_settings.api_version,
            )
        self._client = client
        self._deployment = openai_settings.deployment_name
        self._temperature = analysis_settings.temperature
        self._max_tokens = analysis_settings.max_tokens
        self._system_prompt = SYSTEM_PROMPT.format(
            specialties=", ".join(s.value for s in Specialty),
            severities=", ".join(s.value for s in Severity),
        )

    async def analyze(self, description: str) -> AnalysisResult:
        if not description or not description.strip():
            raise IntakeValidationError("Symptom description is required.", ["description"])
        try:
            response = await self._client.chat.completions.create(
                model=self._deployment,
                messages=[
                    {"role": "system", "content": self._system_prompt},
                    {"role": "user", "content": description},
                ],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            raise ExternalServiceError("Azure OpenAI", str(e)) from e

        content = response.choices[0].message.content or ""
        try:
            result = AnalysisResult.from_document(json.loads(content))
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            logger.warning(f"Unexpected analysis payload from {self._deployment}: {content[:200]}")
            raise ExternalServiceError("Azure OpenAI", f"Malformed analysis reply: {e}") from e

        logger.info(
            f"Analysis completed: deployment={self._deployment} specialty={result.specialty.value} "
            f"severity={result.severity.value}"
        )
        return result
