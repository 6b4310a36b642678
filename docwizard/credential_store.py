"""
Persisted OpenAI API key. One named entry in a small JSON file (or in memory for tests).
"""
import json
import logging
from pathlib import Path
from typing import Protocol

from docwizard.errors import EmptyInputError

logger = logging.getLogger(__name__)

CREDENTIAL_KEY = "openaiApiKey"


class CredentialStore(Protocol):
    def load(self) -> str | None: ...

    def save(self, token: str) -> None: ...

    def clear(self) -> None: ...


def _checked(token: str) -> str:
    token = (token or "").strip()
    if not token:
        raise EmptyInputError("Please enter an API key.")
    return token


class MemoryCredentialStore:
    """Credential kept for the life of the process only."""

    def __init__(self, token: str | None = None):
        self._token = token or None

    def load(self) -> str | None:
        return self._token

    def save(self, token: str) -> None:
        self._token = _checked(token)

    def clear(self) -> None:
        self._token = None


class FileCredentialStore:
    """
    Credential persisted in a JSON file under CREDENTIAL_KEY.
    The file is read on the first load(); later calls are served from memory
    and kept in sync by save() and clear().
    """

    def __init__(self, path: Path | str):
        self._path = Path(path)
        self._loaded = False
        self._token = None

    def _read(self) -> dict:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable credential file %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: dict) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(data), encoding="utf-8")
        try:
            self._path.chmod(0o600)
        except OSError:
            logger.debug("Could not restrict permissions on %s", self._path)

    def load(self) -> str | None:
        if not self._loaded:
            value = self._read().get(CREDENTIAL_KEY)
            self._token = value.strip() if isinstance(value, str) and value.strip() else None
            self._loaded = True
        return self._token

    def save(self, token: str) -> None:
        token = _checked(token)
        data = self._read()
        data[CREDENTIAL_KEY] = token
        self._write(data)
        self._token = token
        self._loaded = True
        logger.info("API key saved to %s", self._path)

    def clear(self) -> None:
        data = self._read()
        if CREDENTIAL_KEY in data:
            del data[CREDENTIAL_KEY]
            self._write(data)
        self._token = None
        self._loaded = True
        logger.info("API key cleared")
