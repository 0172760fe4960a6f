"""
Speech capture: one utterance in, one callback out.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ...application.ports.services.speech_service import SpeechRecognizer
from ...domain.enums.workflow import SpeechTarget
from ...domain.errors import SpeechUnavailableError

logger = logging.getLogger(__name__)

TextCallback = Callable[[str], None]
ErrorCallback = Callable[[str], None]

MSG_STOPPED = "Speech capture stopped."
MSG_FAILED = "Speech recognition failed. Please try again."


@dataclass
class CaptureHandle:
    """A running recognition bound to one form field."""

    target: SpeechTarget
    task: "asyncio.Task[None]"

    @property
    def done(self) -> bool:
        return self.task.done()

    async def wait(self) -> None:
        """Block until the capture finished or was stopped."""
        await asyncio.wait({self.task})


class SpeechCaptureAdapter:
    """Runs the platform recognizer for a single utterance.

    Every ``begin`` produces exactly one of ``on_text`` or ``on_error``.
    Without a recognizer ``on_error`` fires immediately and no capture starts.
    """

    def __init__(self, recognizer: Optional[SpeechRecognizer], locale: str = "en-US"):
        self._recognizer = recognizer
        self._locale = locale

    @property
    def available(self) -> bool:
        return self._recognizer is not None

    def begin(
        self,
        audio: bytes,
        on_text: TextCallback,
        on_error: ErrorCallback,
        target: SpeechTarget = SpeechTarget.SYMPTOMS,
    ) -> Optional[CaptureHandle]:
        if self._recognizer is None:
            on_error(SpeechUnavailableError().message)
            return None
        task = asyncio.get_running_loop().create_task(
            self._recognize(audio, on_text, on_error, target)
        )
        # Fires on cancellation whether or not the coroutine had started.
        task.add_done_callback(lambda t: on_error(MSG_STOPPED) if t.cancelled() else None)
        return CaptureHandle(target=target, task=task)

    def end(self, handle: Optional[CaptureHandle]) -> None:
        """Stop a capture that is still running. Finished captures are left alone."""
        if handle is not None and not handle.task.done():
            handle.task.cancel()

    async def _recognize(
        self,
        audio: bytes,
        on_text: TextCallback,
        on_error: ErrorCallback,
        target: SpeechTarget,
    ) -> None:
        try:
            text = await self._recognizer.recognize_once(audio, self._locale)
        except Exception as e:
            logger.warning(
                f"Speech recognition failed for target={target.value}: {e}", exc_info=True
            )
            on_error(MSG_FAILED)
            return
        on_text(text)
