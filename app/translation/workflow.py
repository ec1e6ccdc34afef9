import logging
from typing import List

from app.errors import EmptyDocumentError, EmptyTranslationError, ParseError
from app.parsing import SubtitleEntry, parse_srt
from app.translation.llm import LLM

log = logging.getLogger(__name__)


async def translate_srt(
    srt_content: str, language: str, llm: LLM
) -> List[SubtitleEntry]:
    """
    Translates a whole SRT document and parses the result into entries.

    Raises:
        EmptyDocumentError: No document content was given; no request is made.
        TranslationError: The translation request failed.
        EmptyTranslationError: The service returned nothing.
        ParseError: The service returned text without a single valid block.
    """
    if not srt_content or not srt_content.strip():
        raise EmptyDocumentError("No file content to translate.")

    log.info(f"Translating SRT document ({len(srt_content)} chars) to {language}")
    translated = await llm.translate_srt(srt_content, language)

    if not translated:
        log.warning(f"Translation to {language} came back empty.")
        raise EmptyTranslationError(
            "The translation service returned no content. Please try again."
        )

    entries = parse_srt(translated)
    if not entries:
        log.warning(f"Translation to {language} yielded no valid SRT blocks.")
        raise ParseError(
            "Failed to parse the translated SRT content. The format may be invalid."
        )

    log.info(f"Translation to {language} produced {len(entries)} entries")
    return entries
