import logging
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from app.errors import InputTypeError

log = logging.getLogger(__name__)

SRT_MEDIA_TYPE = "application/x-subrip"

# A lone "\r" only counts as a break when it is not the first half of "\r\n"
BLOCK_SEPARATOR = re.compile(r"(?:\r\n|\r(?!\n)|\n){2,}")
LINE_BREAK = re.compile(r"\r\n|\r|\n")
SEQUENCE_LABEL = re.compile(r"[0-9]+")
TIMING_SEPARATOR = "-->"


@dataclass(frozen=True)
class SubtitleEntry:
    """
    One SRT block: sequence number, timing line and (possibly empty) text.

    ``index`` is the position among accepted blocks and is never written out.
    """

    index: int
    sequence: str
    timing: str
    text: str


def parse_srt(srt_content: str) -> List[SubtitleEntry]:
    """
    Parses SRT text into a list of SubtitleEntry.

    Blocks are separated by two or more line breaks (``\\n``, ``\\r\\n`` or
    ``\\r``, mixed freely). A block is kept only when its first line is all
    digits and its second line contains ``-->``; anything else is dropped.

    Args:
        srt_content: Raw SRT document text.

    Returns:
        Entries in document order, indexed from 0. Empty list for empty input.
    """
    if not srt_content:
        return []

    entries: List[SubtitleEntry] = []
    dropped = 0
    # A leading BOM is not whitespace to str.strip()
    for block in BLOCK_SEPARATOR.split(srt_content.lstrip("\ufeff").strip()):
        lines = LINE_BREAK.split(block)
        if len(lines) < 2:
            dropped += 1
            continue

        sequence, timing = lines[0], lines[1]
        if not SEQUENCE_LABEL.fullmatch(sequence) or TIMING_SEPARATOR not in timing:
            dropped += 1
            continue

        entries.append(
            SubtitleEntry(
                index=len(entries),
                sequence=sequence,
                timing=timing,
                text="\n".join(lines[2:]),
            )
        )

    if dropped:
        log.debug(f"Dropped {dropped} malformed SRT blocks.")
    log.debug(f"Parsed {len(entries)} SRT entries.")
    return entries


def reconstruct_srt(entries: Iterable[SubtitleEntry]) -> str:
    """Builds SRT text from entries; always ends with exactly one line break."""
    blocks = [f"{e.sequence}\n{e.timing}\n{e.text}" for e in entries]
    return "\n\n".join(blocks) + "\n"


def normalize_entry_text(text: str) -> str:
    # Entry text must never contain a blank line, it would split the block
    text = LINE_BREAK.sub("\n", text)
    text = re.sub(r"\n{2,}", "\n", text)
    return text.strip("\n")


def update_entry_text(
    entries: List[SubtitleEntry], index: int, text: str
) -> List[SubtitleEntry]:
    """
    Returns a new list where only the entry at ``index`` has its text replaced.

    Raises:
        IndexError: If ``index`` is out of range.
    """
    if index < 0 or index >= len(entries):
        raise IndexError(f"No subtitle entry at index {index}")

    updated = list(entries)
    updated[index] = replace(entries[index], text=normalize_entry_text(text))
    return updated


def is_srt_file(filename: Optional[str], content_type: Optional[str] = None) -> bool:
    if content_type == SRT_MEDIA_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(".srt")


def validate_srt_file(
    filename: Optional[str], content_type: Optional[str] = None
) -> None:
    if not is_srt_file(filename, content_type):
        raise InputTypeError("Invalid file type. Please upload a .srt file.")


def decode_srt_bytes(srt_bytes: bytes) -> str:
    """
    Decodes uploaded SRT bytes. UTF-8 (with or without BOM) is tried first,
    then Latin-1, which accepts any byte sequence.
    """
    try:
        return srt_bytes.decode("utf-8-sig")
    except UnicodeDecodeError:
        log.warning("SRT file is not valid UTF-8, falling back to latin1.")
        return srt_bytes.decode("latin1")
