"""
Speech recognition interface for audio-to-text conversion.
"""

from abc import ABC, abstractmethod


class SpeechRecognizer(ABC):
    """Platform speech-to-text capability."""

    @abstractmethod
    async def recognize_once(self, audio: bytes, locale: str) -> str:
        """
        Recognize a single utterance.

        Args:
            audio: WAV/PCM audio of one utterance
            locale: Recognition locale, e.g. "en-US"

        Returns:
            The final transcript (no interim results)
        """
        pass
