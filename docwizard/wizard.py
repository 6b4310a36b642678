"""
Three-step document wizard: description -> form entry -> result.
Owns one WizardState and sequences the field and document generators over it.
Uses Wizard class (OOP); each transition returns a tagged Outcome.
"""
import logging
import threading

from docwizard.credential_store import CredentialStore
from docwizard.document_generator import DocumentGenerator
from docwizard.errors import InvalidStepError
from docwizard.field_generator import FieldSchemaGenerator
from docwizard.llm_client import CompletionClient
from docwizard.models import Step, WizardState
from docwizard.result import Outcome, attempt

logger = logging.getLogger(__name__)


class Wizard:
    """
    State machine for one user session:
    1. DESCRIPTION: edit the description; submit_description() infers the fields
    2. FORM_ENTRY: fill in values; submit_form() renders the document
    3. RESULT: markup ready for export; reset() starts over

    While a generator call is in flight, busy is True and both submit_* calls return None.
    Claiming busy is atomic, so concurrent submits from several threads start one call.
    """

    def __init__(
        self,
        credential_store: CredentialStore,
        field_generator: FieldSchemaGenerator | None = None,
        document_generator: DocumentGenerator | None = None,
        completion_client: CompletionClient | None = None,
    ):
        self._store = credential_store
        if field_generator is None or document_generator is None:
            completion_client = completion_client or CompletionClient()
        self._field_generator = field_generator or FieldSchemaGenerator(completion_client)
        self._document_generator = document_generator or DocumentGenerator(completion_client)
        self.state = WizardState()
        self._lock = threading.Lock()

    # -- credential ---------------------------------------------------------

    @property
    def has_credential(self) -> bool:
        return bool(self._store.load())

    def save_credential(self, token: str) -> None:
        self._store.save(token)

    def clear_credential(self) -> None:
        self._store.clear()

    # -- editing ------------------------------------------------------------

    def _require_step(self, step: Step, action: str) -> None:
        if self.state.step != step:
            raise InvalidStepError(
                f"Cannot {action} in step {int(self.state.step)} ({self.state.step.name.lower()})."
            )

    def set_document_prompt(self, text: str) -> None:
        self._require_step(Step.DESCRIPTION, "edit the document description")
        self.state.document_prompt = text or ""

    def set_field_value(self, name: str, value) -> None:
        self._require_step(Step.FORM_ENTRY, "edit form values")
        self.state.form_data[name] = "" if value is None else str(value)

    # -- transitions --------------------------------------------------------

    def _begin(self, step: Step, action: str) -> WizardState | None:
        """Check the step and claim the busy flag in one locked step. None if already busy."""
        with self._lock:
            self._require_step(step, action)
            state = self.state
            if state.busy:
                logger.info("Ignoring transition request: a request is already in progress")
                return None
            state.error_message = None
            state.busy = True
            return state

    def _run(self, state: WizardState, func, *args) -> Outcome:
        # busy was claimed by _begin; the lock is not held during the call
        try:
            outcome = attempt(func, *args)
        finally:
            state.busy = False
        if self.state is not state:
            logger.info("Wizard was reset while a request was in flight; discarding its result")
            return outcome
        if not outcome.ok:
            state.error_message = outcome.message
            logger.warning("Step %d failed: %s", int(state.step), outcome.message)
        return outcome

    def submit_description(self) -> Outcome | None:
        """Step 1 -> 2. On failure the wizard stays in DESCRIPTION with error_message set."""
        state = self._begin(Step.DESCRIPTION, "generate fields")
        if state is None:
            return None
        outcome = self._run(
            state, self._field_generator.generate_fields, self._store.load(), state.document_prompt
        )
        if outcome.ok and self.state is state:
            state.field_schema = outcome.value
            state.error_message = None
            state.step = Step.FORM_ENTRY
            logger.info("Advanced to form entry with %d fields", len(outcome.value))
        return outcome

    def submit_form(self) -> Outcome | None:
        """Step 2 -> 3. On failure the wizard stays in FORM_ENTRY with error_message set."""
        state = self._begin(Step.FORM_ENTRY, "generate the document")
        if state is None:
            return None
        outcome = self._run(
            state,
            self._document_generator.generate_document,
            self._store.load(),
            state.document_prompt,
            dict(state.form_data),
        )
        if outcome.ok and self.state is state:
            state.document_markup = outcome.value
            state.step = Step.RESULT
            logger.info("Advanced to result")
        return outcome

    def reset(self) -> None:
        """Back to an empty DESCRIPTION step. The stored credential is kept."""
        with self._lock:
            self.state = WizardState()
        logger.info("Wizard reset")
