import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from app.errors import EmptyDocumentError, SubtitleError, TranslationInProgressError
from app.parsing import SubtitleEntry, reconstruct_srt, update_entry_text
from app.translation.llm import LLM
from app.translation.workflow import translate_srt

log = logging.getLogger(__name__)


class TranslationStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class TranslationSession:
    """
    Editing state for one uploaded SRT file.

    Only one translation may be in flight per session. Each file selection
    bumps ``generation``; a translation that resolves after the file was
    re-selected is discarded instead of overwriting newer state.
    """

    id: str
    filename: str
    content: str
    target_language: str
    status: TranslationStatus = TranslationStatus.IDLE
    entries: List[SubtitleEntry] = field(default_factory=list)
    error: Optional[str] = None
    generation: int = 0
    created_at: float = field(default_factory=time.time)

    def select_file(self, filename: str, content: str) -> None:
        self.filename = filename
        self.content = content
        self.entries = []
        self.error = None
        self.status = TranslationStatus.IDLE
        self.generation += 1

    async def translate(
        self, llm: LLM, target_language: Optional[str] = None
    ) -> List[SubtitleEntry]:
        if self.status is TranslationStatus.REQUESTING:
            raise TranslationInProgressError(
                "A translation is already in progress for this file."
            )
        if target_language:
            self.target_language = target_language
        if not self.content.strip():
            # Stays idle, no request is made
            raise EmptyDocumentError("No file content to translate.")

        generation = self.generation
        self.status = TranslationStatus.REQUESTING
        self.error = None
        self.entries = []

        try:
            entries = await translate_srt(self.content, self.target_language, llm)
        except SubtitleError as e:
            if generation == self.generation:
                self.mark_failed(e.message)
            raise
        except asyncio.CancelledError:
            if generation == self.generation:
                self.mark_failed("Translation was cancelled.")
            raise

        if generation != self.generation:
            log.info(
                f"Session {self.id}: file changed during translation, discarding result"
            )
            return self.entries

        self.entries = entries
        self.status = TranslationStatus.SUCCEEDED
        return entries

    def mark_failed(self, message: str) -> None:
        self.status = TranslationStatus.FAILED
        self.error = message

    def update_entry(self, index: int, text: str) -> SubtitleEntry:
        self.entries = update_entry_text(self.entries, index, text)
        return self.entries[index]

    def export(self) -> str:
        return reconstruct_srt(self.entries)

    def is_expired(self, max_age_seconds: float, now: Optional[float] = None) -> bool:
        if now is None:
            now = time.time()
        return now - self.created_at > max_age_seconds


class SessionStore:
    """
    In-memory sessions keyed by id. Nothing survives a restart.

    Sessions older than ``max_age_hours`` are dropped whenever a session is
    created or looked up.
    """

    def __init__(self, max_age_hours: Optional[float] = None):
        self._sessions: Dict[str, TranslationSession] = {}
        self.max_age_hours = max_age_hours

    def create(
        self, filename: str, content: str, target_language: str
    ) -> TranslationSession:
        self.cleanup_expired()
        session = TranslationSession(
            id=str(uuid.uuid4()),
            filename=filename,
            content=content,
            target_language=target_language,
        )
        self._sessions[session.id] = session
        log.info(f"Created session {session.id} for file {filename}")
        return session

    def get(self, session_id: str) -> Optional[TranslationSession]:
        self.cleanup_expired()
        return self._sessions.get(session_id)

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def cleanup_expired(self, now: Optional[float] = None) -> int:
        if not self.max_age_hours:
            return 0

        max_age_seconds = self.max_age_hours * 3600
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.is_expired(max_age_seconds, now)
        ]
        for session_id in expired:
            del self._sessions[session_id]
            log.info(f"Removed expired session: {session_id}")
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
