import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


# Google Cloud Configuration
PROJECT_ID = os.getenv("GOOGLE_CLOUD_PROJECT", "")
LOCATION = os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1")
USE_VERTEX = os.getenv("USE_VERTEX_AI", "0")

# Gemini models, one per pipeline stage
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
GEMINI_ANALYSIS_MODEL = os.getenv("GEMINI_ANALYSIS_MODEL", GEMINI_MODEL)
GEMINI_CONDENSE_MODEL = os.getenv("GEMINI_CONDENSE_MODEL", "gemini-2.5-flash-lite")
GEMINI_EVAL_MODEL = os.getenv("GEMINI_EVAL_MODEL", GEMINI_MODEL)

LLM_TIMEOUT_SEC = _int_env("LLM_TIMEOUT_SEC", 90)
LLM_MAX_CALLS_PER_MIN = _int_env("LLM_MAX_CALLS_PER_MIN", 0)  # 0 = unlimited

# Speech Configuration
LANG_STT = os.getenv("LANG_STT", "en-US")

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///" + str(Path(__file__).parent.parent / "starcoach.db"))

# Single pseudo-user until a real identity provider is wired in
OWNER_ID = os.getenv("OWNER_ID", "local-user")

# Pipeline tuning
PRINCIPLE_COUNT = _int_env("PRINCIPLE_COUNT", 5)
QUESTION_COUNT = _int_env("QUESTION_COUNT", 5)
FOCUS_QUESTION_LIMIT = _int_env("FOCUS_QUESTION_LIMIT", 3)
CONDENSED_RESUME_MAX_WORDS = _int_env("CONDENSED_RESUME_MAX_WORDS", 3000)
MIN_SUGGESTED_ANSWER_WORDS = _int_env("MIN_SUGGESTED_ANSWER_WORDS", 12)
EVAL_MAX_ATTEMPTS = _int_env("EVAL_MAX_ATTEMPTS", 2)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# API Configuration
API_KEY = os.getenv("GOOGLE_GENAI_API_KEY") or os.getenv("GOOGLE_API_KEY")


def validate_config():
    """Validate required configuration."""
    if USE_VERTEX != "1" and not API_KEY:
        raise RuntimeError("Set GOOGLE_GENAI_API_KEY/GOOGLE_API_KEY or set USE_VERTEX_AI=1 with ADC.")
    if USE_VERTEX == "1" and not PROJECT_ID:
        raise RuntimeError("USE_VERTEX_AI=1 requires GOOGLE_CLOUD_PROJECT.")
