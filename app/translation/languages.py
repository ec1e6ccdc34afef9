from typing import NamedTuple, Optional


class Language(NamedTuple):
    code: str
    name: str


languages = [
    Language("es", "Spanish"),
    Language("en", "English"),
    Language("fr", "French"),
    Language("de", "German"),
    Language("it", "Italian"),
    Language("pt", "Portuguese"),
    Language("nl", "Dutch"),
    Language("pl", "Polish"),
    Language("ru", "Russian"),
    Language("uk", "Ukrainian"),
    Language("hr", "Croatian"),
    Language("sr", "Serbian"),
    Language("tr", "Turkish"),
    Language("ar", "Arabic"),
    Language("hi", "Hindi"),
    Language("zh", "Chinese (Simplified)"),
    Language("ja", "Japanese"),
    Language("ko", "Korean"),
    Language("id", "Indonesian"),
    Language("vi", "Vietnamese"),
]


def language_code(name: str) -> Optional[str]:
    """Short code for a language display name, or None if it is not listed."""
    for language in languages:
        if language.name == name:
            return language.code
    return None
