from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

# Load .env if present
load_dotenv()


class Settings(BaseSettings):
    # LLM settings
    api_key: str = os.getenv("API_KEY", os.getenv("GOOGLE_API_KEY", ""))
    llm_model: str = os.getenv("LLM_MODEL", "gemini-2.5-flash")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", "0.2"))

    # Upper bound for one translation request, applied by the HTTP layer
    translation_timeout: float = float(os.getenv("TRANSLATION_TIMEOUT", "300"))

    # Upload limits
    max_file_size_mb: int = int(os.getenv("MAX_FILE_SIZE_MB", "10"))

    # Sessions older than this are dropped from memory
    session_max_age_hours: float = float(os.getenv("SESSION_MAX_AGE_HOURS", "24"))

    default_target_language: str = os.getenv("DEFAULT_TARGET_LANGUAGE", "Spanish")

    # Comma separated list of origins for CORS
    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "*")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"

    @property
    def origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]

    @property
    def logging_level(self) -> str:
        return self.log_level.strip().upper()

    @property
    def max_file_size(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


settings = Settings()
