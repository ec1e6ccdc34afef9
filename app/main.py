from fastapi import (
    FastAPI,
    File,
    Form,
    UploadFile,
    HTTPException,
    Depends,
    Request,
    Response,
)
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from pydantic import BaseModel
from typing import Optional
from urllib.parse import quote
import asyncio
import logging
import re

from app.errors import (
    EmptyDocumentError,
    InputTypeError,
    ParseError,
    TranslationError,
    TranslationInProgressError,
)
from app.parsing import (
    SubtitleEntry,
    decode_srt_bytes,
    parse_srt,
    validate_srt_file,
)
from app.sessions import SessionStore, TranslationSession
from app.settings import settings as sett
from app.translation.languages import language_code, languages
from app.translation.llm import LLM

log = logging.getLogger(__name__)
logging.basicConfig(
    level=sett.logging_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Raises ConfigurationError when API_KEY is missing, so startup fails
    app.state.llm = LLM.from_settings(sett)
    log.info(f"Translation model ready: {sett.llm_model}")
    yield


app = FastAPI(title="SRT Translation Editor", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=sett.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

session_store = SessionStore(max_age_hours=sett.session_max_age_hours)


class TranslateRequest(BaseModel):
    target_language: Optional[str] = None


class EntryUpdate(BaseModel):
    text: str


def get_llm(request: Request) -> LLM:
    return request.app.state.llm


def get_sessions() -> SessionStore:
    return session_store


def translated_filename(original_filename: str, language: str) -> str:
    base = re.sub(r"\.srt$", "", original_filename)
    return f"{base}_{language_code(language) or 'translated'}.srt"


def _entry_payload(entry: SubtitleEntry) -> dict:
    return {
        "index": entry.index,
        "sequence": entry.sequence,
        "timing": entry.timing,
        "text": entry.text,
    }


def _session_payload(session: TranslationSession) -> dict:
    return {
        "id": session.id,
        "filename": session.filename,
        "target_language": session.target_language,
        "status": session.status.value,
        "error": session.error,
        "source_entries": len(parse_srt(session.content)),
        "entries": [_entry_payload(e) for e in session.entries],
    }


def _get_session(sessions: SessionStore, session_id: str) -> TranslationSession:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


async def _read_srt_upload(file: UploadFile) -> str:
    try:
        validate_srt_file(file.filename, file.content_type)
    except InputTypeError as e:
        raise HTTPException(status_code=400, detail=e.message)

    file_content = await file.read()

    if len(file_content) > sett.max_file_size:
        raise HTTPException(
            status_code=400,
            detail=f"File too large. Maximum size is {sett.max_file_size_mb}MB",
        )

    if not file_content:
        raise HTTPException(status_code=400, detail="Empty file")

    return decode_srt_bytes(file_content)


@app.get("/")
async def root():
    return {"status": "ok", "model": sett.llm_model}


@app.get("/languages")
async def list_languages():
    return [{"code": lang.code, "name": lang.name} for lang in languages]


@app.post("/sessions", status_code=201)
async def create_session(
    file: UploadFile = File(...),
    target_language: Optional[str] = Form(None),
    sessions: SessionStore = Depends(get_sessions),
):
    content = await _read_srt_upload(file)
    session = sessions.create(
        file.filename or "subtitles.srt",
        content,
        target_language or sett.default_target_language,
    )
    return _session_payload(session)


@app.post("/sessions/{session_id}/file")
async def select_file(
    session_id: str,
    file: UploadFile = File(...),
    sessions: SessionStore = Depends(get_sessions),
):
    session = _get_session(sessions, session_id)
    content = await _read_srt_upload(file)
    session.select_file(file.filename or "subtitles.srt", content)
    log.info(f"Session {session_id}: selected file {file.filename}")
    return _session_payload(session)


@app.get("/sessions/{session_id}")
async def get_session(session_id: str, sessions: SessionStore = Depends(get_sessions)):
    return _session_payload(_get_session(sessions, session_id))


@app.post("/sessions/{session_id}/translate")
async def translate_session(
    session_id: str,
    request: TranslateRequest,
    sessions: SessionStore = Depends(get_sessions),
    llm: LLM = Depends(get_llm),
):
    session = _get_session(sessions, session_id)

    try:
        await asyncio.wait_for(
            session.translate(llm, request.target_language),
            timeout=sett.translation_timeout,
        )
    except TranslationInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except EmptyDocumentError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ParseError as e:
        raise HTTPException(status_code=422, detail=e.message)
    except TranslationError as e:
        raise HTTPException(status_code=502, detail=e.message)
    except asyncio.TimeoutError:
        log.error(f"Session {session_id}: translation timed out")
        message = "Translation took too long. Please try again."
        session.mark_failed(message)
        raise HTTPException(status_code=504, detail=message)

    return _session_payload(session)


@app.patch("/sessions/{session_id}/entries/{index}")
async def update_entry(
    session_id: str,
    index: int,
    update: EntryUpdate,
    sessions: SessionStore = Depends(get_sessions),
):
    session = _get_session(sessions, session_id)
    try:
        entry = session.update_entry(index, update.text)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _entry_payload(entry)


@app.get("/sessions/{session_id}/download")
async def download_session(
    session_id: str, sessions: SessionStore = Depends(get_sessions)
):
    session = _get_session(sessions, session_id)
    if not session.entries:
        raise HTTPException(
            status_code=409,
            detail="Nothing to download yet. Translate the file first.",
        )

    filename = translated_filename(session.filename, session.target_language)
    return Response(
        content=session.export(),
        media_type="text/plain; charset=utf-8",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}"
        },
    )


@app.delete("/sessions/{session_id}")
async def delete_session(
    session_id: str, sessions: SessionStore = Depends(get_sessions)
):
    if not sessions.delete(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    return {"status": "deleted", "id": session_id}
