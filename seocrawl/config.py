import os
import logging
from pathlib import Path
from typing import Optional

try:
    from dotenv import load_dotenv
except ImportError:
    logging.warning("python-dotenv not available; using environment variables only")
else:
    loaded = load_dotenv()
    if not loaded and Path(".env").exists():
        raise RuntimeError(".env file present but failed to load")


def get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw


def get_optional_str_env(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return raw


def get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logging.exception("Invalid %s: %r", name, raw)
        return default


def get_float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logging.exception("Invalid %s: %r", name, raw)
        return default


DATABASE_URL = get_optional_str_env("DATABASE_URL")


def optimizer_api_key() -> Optional[str]:
    """Return the optimizer API key; OPENROUTER_API_KEY is accepted as a fallback."""
    return get_optional_str_env("OPTIMIZER_API_KEY") or get_optional_str_env("OPENROUTER_API_KEY")
