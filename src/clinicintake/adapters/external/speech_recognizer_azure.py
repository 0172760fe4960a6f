"""
Azure Speech short-audio REST recognizer.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from ...application.ports.services.speech_service import SpeechRecognizer
from ...core.config import AzureSpeechSettings
from ...core.exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)

RECOGNITION_PATH = "/speech/recognition/conversation/cognitiveservices/v1"


class AzureSpeechRecognizer(SpeechRecognizer):
    """Single-utterance recognition; only the final DisplayText is returned."""

    def __init__(self, settings: AzureSpeechSettings):
        if not settings.is_configured:
            raise ConfigurationError(
                "Azure Speech Service subscription key and region (or endpoint) are required."
            )
        self._subscription_key = settings.subscription_key
        self._base_url = (
            settings.endpoint.rstrip("/")
            if settings.endpoint
            else f"https://{settings.region}.stt.speech.microsoft.com"
        )
        self._timeout = aiohttp.ClientTimeout(total=settings.timeout_seconds)

    async def recognize_once(self, audio: bytes, locale: str) -> str:
        url = f"{self._base_url}{RECOGNITION_PATH}"
        headers = {
            "Ocp-Apim-Subscription-Key": self._subscription_key,
            "Content-Type": "audio/wav; codecs=audio/pcm; samplerate=16000",
            "Accept": "application/json",
        }
        params = {"language": locale, "format": "simple"}

        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(url, params=params, data=audio, headers=headers) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise ExternalServiceError(
                            "Azure Speech", f"{response.status} {error_text}"
                        )
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ExternalServiceError("Azure Speech", str(e)) from e

        status: Optional[str] = payload.get("RecognitionStatus")
        if status != "Success":
            raise ExternalServiceError("Azure Speech", f"Recognition status: {status}")
        text = (payload.get("DisplayText") or "").strip()
        logger.info(f"Speech recognized: locale={locale} chars={len(text)}")
        return text
