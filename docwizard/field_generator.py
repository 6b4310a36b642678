"""
Step 1 -> 2: ask the completion endpoint which fields a document needs, given its description.
Uses FieldSchemaGenerator class (OOP).
"""
import logging

from docwizard.errors import EmptyInputError, MissingCredentialError
from docwizard.llm_client import CompletionClient
from docwizard.models import FieldSpec
from docwizard.normalizer import parse_field_schema, strip_fence
from docwizard.prompts import build_field_schema_prompt

logger = logging.getLogger(__name__)


class FieldSchemaGenerator:
    """
    Infers an ordered list of named, typed form fields from a free-text document description.
    Preconditions are checked before any network call.
    """

    def __init__(self, completion_client: CompletionClient | None = None):
        self._llm = completion_client or CompletionClient()

    def generate_fields(self, credential: str | None, document_prompt: str) -> list[FieldSpec]:
        if not credential:
            raise MissingCredentialError()
        if not (document_prompt or "").strip():
            raise EmptyInputError()

        prompt = build_field_schema_prompt(document_prompt)
        raw = self._llm.complete(credential, prompt)
        fields = parse_field_schema(strip_fence(raw, "json"))
        logger.info("Field schema generated: %d fields", len(fields))
        return fields
