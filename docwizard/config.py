"""
Load env from the project root .env. Used by the completion client, the credential store and both front-ends.
Encapsulates configuration in a Config class (OOP).
"""
import logging
import os
import secrets
import sys
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o"
DEFAULT_CREDENTIAL_FILE = Path.home() / ".docwizard" / "credentials.json"
DEFAULT_SESSION_TTL_SEC = 3600
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from None


class Config:
    """
    Holds OpenAI/Azure and application settings loaded from the environment (and .env).
    Single responsibility: load and expose environment-based settings.
    """

    _env_file = Path(__file__).resolve().parent.parent / ".env"

    def __init__(self):
        self._load_env()
        self._openai_base_url = os.getenv("OPENAI_BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL
        self._model = os.getenv("DOCWIZARD_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL
        self._azure_endpoint = os.getenv("AZURE_OPENAI_ENDPOINT", "").strip()
        self._azure_api_version = os.getenv("AZURE_OPENAI_API_VERSION", "2024-12-01-preview").strip()
        self._azure_deployment = os.getenv("AZURE_OPENAI_DEPLOYMENT", DEFAULT_MODEL).strip()
        self._request_timeout = _optional_float("DOCWIZARD_REQUEST_TIMEOUT")
        credential_file = os.getenv("DOCWIZARD_CREDENTIAL_FILE", "").strip()
        self._credential_file = Path(credential_file).expanduser() if credential_file else DEFAULT_CREDENTIAL_FILE
        session_ttl = _optional_float("DOCWIZARD_SESSION_TTL")
        self._session_ttl = DEFAULT_SESSION_TTL_SEC if session_ttl is None else session_ttl
        self._log_level = os.getenv("DOCWIZARD_LOG_LEVEL", "INFO").strip().upper() or "INFO"
        self._secret_key = os.getenv("FLASK_SECRET_KEY", "").strip() or secrets.token_hex(32)

    def _load_env(self) -> None:
        if self._env_file.exists():
            load_dotenv(self._env_file)

    @property
    def OPENAI_BASE_URL(self) -> str:
        return self._openai_base_url

    @property
    def MODEL(self) -> str:
        return self._model

    @property
    def AZURE_OPENAI_ENDPOINT(self) -> str:
        return self._azure_endpoint

    @property
    def AZURE_OPENAI_API_VERSION(self) -> str:
        return self._azure_api_version

    @property
    def AZURE_OPENAI_DEPLOYMENT(self) -> str:
        return self._azure_deployment

    @property
    def USE_AZURE_OPENAI(self) -> bool:
        return bool(self._azure_endpoint)

    @property
    def REQUEST_TIMEOUT(self) -> float | None:
        return self._request_timeout

    @property
    def CREDENTIAL_FILE(self) -> Path:
        return self._credential_file

    @property
    def SESSION_TTL(self) -> float:
        return self._session_ttl

    @property
    def LOG_LEVEL(self) -> str:
        return self._log_level

    @property
    def SECRET_KEY(self) -> str:
        return self._secret_key


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stdout. Called once by each entry point (Flask app, Streamlit UI)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
