"""
Step 2 -> 3: render the final HTML document from the description and the filled-in form.
"""
import logging

from docwizard.errors import MissingCredentialError
from docwizard.llm_client import CompletionClient
from docwizard.models import FormData
from docwizard.normalizer import strip_fence
from docwizard.prompts import build_document_prompt

logger = logging.getLogger(__name__)


class DocumentGenerator:
    def __init__(self, completion_client: CompletionClient | None = None):
        self._llm = completion_client or CompletionClient()

    def generate_document(self, credential: str | None, document_prompt: str, form_data: FormData) -> str:
        """
        Returns the document markup with any ```html fence removed.
        A blank description is passed through; only the credential is required here.
        """
        if not credential:
            raise MissingCredentialError()

        prompt = build_document_prompt(document_prompt, form_data)
        raw = self._llm.complete(credential, prompt)
        markup = strip_fence(raw, "html")
        logger.info("Document generated: %d chars of markup", len(markup))
        return markup
