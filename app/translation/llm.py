import logging

from langchain_google_genai import ChatGoogleGenerativeAI
from langchain_core.messages import HumanMessage, SystemMessage

from app.errors import ConfigurationError, TranslationError

log = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are an expert SRT file translator. Your sole purpose is to translate the text "
    "content of SRT files into a specified language while keeping the formatting "
    "(sequence numbers, timestamps) identical to the original.\n"
    "- DO NOT translate or alter sequence numbers.\n"
    "- DO NOT translate or alter timestamps.\n"
    "- ONLY translate the subtitle text.\n"
    "- DO NOT add any introductory text, concluding remarks, or explanations.\n"
    "- The output must be ONLY the translated SRT content, maintaining the exact "
    "original structure."
)

TRANSLATION_FAILED_MESSAGE = (
    "Failed to translate subtitles. Please check the server logs for more details."
)


def build_prompt(srt_content: str, target_language: str) -> str:
    return (
        f"Translate the following SRT subtitle content into {target_language}:"
        f"\n\n{srt_content}"
    )


def _response_text(response) -> str:
    content = getattr(response, "content", None)
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        # Multi-part responses come back as a list of strings or text blocks
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    raise ValueError(f"Unexpected response content type: {type(content).__name__}")


class LLM:
    def __init__(self, model_name: str, api_key: str, temperature: float = 0.2):
        if not api_key:
            raise ConfigurationError("API_KEY environment variable not set")
        self.model_name = model_name
        self.model = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=temperature,
        )

    @classmethod
    def from_settings(cls, settings) -> "LLM":
        return cls(
            settings.llm_model,
            api_key=settings.api_key,
            temperature=settings.llm_temperature,
        )

    async def translate_srt(self, srt_content: str, target_language: str) -> str:
        """
        Sends the whole SRT document to the model in a single request.

        Returns the translated document with surrounding whitespace trimmed.
        Any failure is logged and re-raised as TranslationError with a generic
        message; the underlying error is not exposed to the caller.
        """
        messages = [
            SystemMessage(content=SYSTEM_INSTRUCTION),
            HumanMessage(content=build_prompt(srt_content, target_language)),
        ]

        try:
            response = await self.model.ainvoke(messages)
            translated = _response_text(response)
        except Exception as e:
            log.error(f"Error translating SRT content to {target_language}: {e!r}")
            raise TranslationError(TRANSLATION_FAILED_MESSAGE) from e

        return translated.strip()
