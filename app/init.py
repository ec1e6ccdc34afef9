import os
import sys
import argparse
import logging
from dotenv import load_dotenv, find_dotenv


logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
log = logging.getLogger("init")

ENV_TEMPLATE = """# SRT Translation Editor settings
# Gemini API key (required)
API_KEY=

# LLM settings
LLM_MODEL=gemini-2.5-flash
LLM_TEMPERATURE=0.2
TRANSLATION_TIMEOUT=300

# Upload limits
MAX_FILE_SIZE_MB=10

# Sessions older than this are dropped from memory
SESSION_MAX_AGE_HOURS=24

DEFAULT_TARGET_LANGUAGE=Spanish

# Comma separated CORS origins
ALLOWED_ORIGINS=*

LOG_LEVEL=INFO
"""


def create_env_file(path=".env"):
    """Creates a .env file with default settings if none exists"""
    env_path = find_dotenv(usecwd=True)
    if not env_path:
        log.info("Creating new .env file...")
        with open(path, "w") as f:
            f.write(ENV_TEMPLATE)
        log.info(
            "The .env file was created. Fill in API_KEY before starting the server."
        )
        return path
    return env_path


def check_config():
    """Checks that the settings needed to reach the translation service are present"""
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path)
    api_key = os.getenv("API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not api_key:
        log.error("❌ API_KEY is not set. Add it to .env or the environment.")
        return False

    log.info(f"✅ API_KEY is set, model: {os.getenv('LLM_MODEL', 'gemini-2.5-flash')}")
    return True


def list_languages():
    from app.translation.languages import languages

    for language in languages:
        log.info(f"{language.code}\t{language.name}")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description="SRT Translation Editor setup")
    parser.add_argument("--create-env", action="store_true", help="Create a .env file")
    parser.add_argument(
        "--check-config", action="store_true", help="Check required settings"
    )
    parser.add_argument(
        "--languages", action="store_true", help="List supported target languages"
    )
    parser.add_argument("--all", action="store_true", help="Run every step")

    args = parser.parse_args(argv)
    no_flags = not (args.create_env or args.check_config or args.languages)

    ok = True
    if args.all or no_flags:
        create_env_file()
        ok = check_config()
    else:
        if args.create_env:
            create_env_file()
        if args.check_config:
            ok = check_config()
        if args.languages:
            list_languages()

    if ok:
        log.info("Setup finished. The service is ready to use.")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
