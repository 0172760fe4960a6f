"""In-process registry of running check-in workflows."""

import logging
import uuid
from collections import OrderedDict
from typing import Optional

from .check_in_workflow import CheckInWorkflow

logger = logging.getLogger(__name__)


class CheckInSessionRegistry:
    """Maps opaque session ids to workflows. Oldest sessions are evicted past ``max_sessions``."""

    def __init__(self, max_sessions: int = 1000):
        self._sessions: "OrderedDict[str, CheckInWorkflow]" = OrderedDict()
        self._max_sessions = max_sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def add(self, workflow: CheckInWorkflow) -> str:
        session_id = uuid.uuid4().hex
        self._sessions[session_id] = workflow
        while len(self._sessions) > self._max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info(f"Evicted check-in session {evicted}")
        return session_id

    def get(self, session_id: str) -> Optional[CheckInWorkflow]:
        return self._sessions.get(session_id)

    def discard(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None
