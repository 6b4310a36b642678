"""
Completion client for OpenAI/Azure. Sends one user message, returns the raw completion text.
The API key comes from the caller (the user's stored credential), not from the environment.
"""
import logging
import time

from openai import APIError, APIStatusError, AzureOpenAI, OpenAI

from docwizard.config import Config
from docwizard.errors import (
    EmptyInputError,
    FormatError,
    GENERIC_SERVICE_MESSAGE,
    MissingCredentialError,
    ServiceError,
)

logger = logging.getLogger(__name__)


def _error_detail(body) -> str | None:
    """Pull error.message out of an error response body, if it has one."""
    if not isinstance(body, dict):
        return None
    nested = body.get("error")
    if isinstance(nested, dict):
        body = nested
    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return None


class CompletionClient:
    """
    Encapsulates the OpenAI or Azure OpenAI chat-completions call and the model.
    A new SDK client is built per call because the credential can change between calls,
    and closed after it unless the HTTP client was passed in by the caller.
    Retries are disabled: a failed call surfaces immediately.
    """

    def __init__(self, config: Config | None = None, http_client=None):
        self._cfg = config or Config()
        self._http_client = http_client
        self._model = self._cfg.AZURE_OPENAI_DEPLOYMENT if self._cfg.USE_AZURE_OPENAI else self._cfg.MODEL

    def _client(self, credential: str):
        kwargs = {"api_key": credential, "max_retries": 0}
        if self._cfg.REQUEST_TIMEOUT is not None:
            kwargs["timeout"] = self._cfg.REQUEST_TIMEOUT
        if self._http_client is not None:
            kwargs["http_client"] = self._http_client
        if self._cfg.USE_AZURE_OPENAI:
            return AzureOpenAI(
                azure_endpoint=self._cfg.AZURE_OPENAI_ENDPOINT,
                api_version=self._cfg.AZURE_OPENAI_API_VERSION,
                **kwargs,
            )
        return OpenAI(base_url=self._cfg.OPENAI_BASE_URL, **kwargs)

    def complete(self, credential: str | None, instruction: str) -> str:
        if not credential:
            raise MissingCredentialError()
        if not instruction:
            raise EmptyInputError("Instruction must not be empty.")

        started = time.monotonic()
        logger.info("Completion request: model=%s, instruction=%d chars", self._model, len(instruction))
        client = self._client(credential)
        try:
            response = client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": instruction}],
            )
        except APIStatusError as e:
            message = _error_detail(e.body) or GENERIC_SERVICE_MESSAGE
            logger.warning("Completion failed with HTTP %s: %s", e.status_code, message)
            raise ServiceError(message, status_code=e.status_code) from e
        except APIError as e:
            logger.warning("Completion transport failure: %s", type(e).__name__)
            raise ServiceError(GENERIC_SERVICE_MESSAGE) from e
        finally:
            if self._http_client is None:
                client.close()

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise FormatError("The API response did not contain a completion.") from e
        logger.info("Completion received in %.2fs", time.monotonic() - started)
        return content or ""
