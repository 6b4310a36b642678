"""Wizard state machine: transitions, failures, busy guard and reset."""

import threading

import pytest

from docwizard.errors import (
    EMPTY_PROMPT_MESSAGE,
    FormatError,
    InvalidStepError,
    MISSING_CREDENTIAL_MESSAGE,
    MissingCredentialError,
    ServiceError,
)
from docwizard.models import FieldSpec, Step, WizardState
from docwizard.wizard import Wizard

FIELDS_REPLY = '```json\n[{"name":"Client","type":"text"},{"name":"Date","type":"date"}]\n```'
DOCUMENT_REPLY = "```html\n<h1>Invoice</h1>...\n```"


def _to_form_entry(wizard, completion):
    completion.queue(FIELDS_REPLY)
    wizard.set_document_prompt("Invoice for client X")
    assert wizard.submit_description().ok


def _to_result(wizard, completion):
    _to_form_entry(wizard, completion)
    completion.queue(DOCUMENT_REPLY)
    wizard.set_field_value("Client", "Acme")
    assert wizard.submit_form().ok


class TestDescriptionStep:

    def test_initial_state(self, wizard):
        assert wizard.state == WizardState()
        assert wizard.state.step == Step.DESCRIPTION
        assert wizard.has_credential

    def test_generate_fields_advances_to_form_entry(self, wizard, completion):
        completion.queue(FIELDS_REPLY)
        wizard.set_document_prompt("Invoice for client X")

        outcome = wizard.submit_description()

        assert outcome.ok
        assert outcome.value == [FieldSpec("Client", "text"), FieldSpec("Date", "date")]
        assert wizard.state.step == Step.FORM_ENTRY
        assert wizard.state.field_schema == outcome.value
        assert wizard.state.error_message is None
        assert wizard.state.busy is False

    def test_service_error_keeps_description_step(self, wizard, completion):
        completion.queue(ServiceError("invalid_api_key", status_code=401))
        wizard.set_document_prompt("Invoice for client X")

        outcome = wizard.submit_description()

        assert not outcome.ok
        assert isinstance(outcome.error, ServiceError)
        assert wizard.state.step == Step.DESCRIPTION
        assert wizard.state.error_message == "invalid_api_key"
        assert wizard.state.busy is False
        assert wizard.state.document_prompt == "Invoice for client X"

    def test_missing_credential(self, empty_store, completion):
        wizard = Wizard(empty_store, completion_client=completion)
        wizard.set_document_prompt("Invoice")

        outcome = wizard.submit_description()

        assert isinstance(outcome.error, MissingCredentialError)
        assert wizard.state.error_message == MISSING_CREDENTIAL_MESSAGE
        assert completion.calls == []

    def test_blank_description(self, wizard, completion):
        wizard.set_document_prompt("   ")

        outcome = wizard.submit_description()

        assert not outcome.ok
        assert wizard.state.error_message == EMPTY_PROMPT_MESSAGE
        assert wizard.state.step == Step.DESCRIPTION
        assert completion.calls == []

    def test_retry_after_failure_clears_error(self, wizard, completion):
        completion.queue("not json", FIELDS_REPLY)
        wizard.set_document_prompt("Invoice")

        first = wizard.submit_description()
        assert isinstance(first.error, FormatError)
        assert wizard.state.error_message

        second = wizard.submit_description()
        assert second.ok
        assert wizard.state.error_message is None
        assert wizard.state.step == Step.FORM_ENTRY

    def test_saving_credential_recovers_from_missing_key(self, empty_store, completion):
        wizard = Wizard(empty_store, completion_client=completion)
        wizard.set_document_prompt("Invoice")
        assert not wizard.submit_description().ok

        wizard.save_credential("sk-new")
        completion.queue(FIELDS_REPLY)

        assert wizard.submit_description().ok
        assert completion.calls[0]["credential"] == "sk-new"

    def test_description_is_read_only_after_step_one(self, wizard, completion):
        _to_form_entry(wizard, completion)

        with pytest.raises(InvalidStepError):
            wizard.set_document_prompt("Something else")


class TestFormEntryStep:

    def test_values_are_stored_as_strings(self, wizard, completion):
        _to_form_entry(wizard, completion)

        wizard.set_field_value("Client", "Acme")
        wizard.set_field_value("Amount", 120)
        wizard.set_field_value("Notes", None)

        assert wizard.state.form_data == {"Client": "Acme", "Amount": "120", "Notes": ""}

    def test_duplicate_names_overwrite(self, wizard, completion):
        _to_form_entry(wizard, completion)

        wizard.set_field_value("Client", "first")
        wizard.set_field_value("Client", "second")

        assert wizard.state.form_data == {"Client": "second"}

    def test_form_values_rejected_outside_form_entry(self, wizard):
        with pytest.raises(InvalidStepError):
            wizard.set_field_value("Client", "Acme")

    def test_generate_document_advances_to_result(self, wizard, completion):
        _to_form_entry(wizard, completion)
        completion.queue(DOCUMENT_REPLY)
        wizard.set_field_value("Client", "Acme")
        wizard.set_field_value("Date", "2024-01-01")

        outcome = wizard.submit_form()

        assert outcome.ok
        assert wizard.state.step == Step.RESULT
        assert wizard.state.document_markup == "<h1>Invoice</h1>..."
        assert '"Client": "Acme"' in completion.calls[-1]["instruction"]
        assert "Invoice for client X" in completion.calls[-1]["instruction"]

    def test_failure_keeps_form_entry(self, wizard, completion):
        _to_form_entry(wizard, completion)
        completion.queue(ServiceError())
        wizard.set_field_value("Client", "Acme")

        outcome = wizard.submit_form()

        assert not outcome.ok
        assert wizard.state.step == Step.FORM_ENTRY
        assert wizard.state.busy is False
        assert wizard.state.error_message
        assert wizard.state.form_data == {"Client": "Acme"}
        assert wizard.state.document_markup is None

    def test_credential_cleared_before_document(self, wizard, completion):
        _to_form_entry(wizard, completion)
        wizard.clear_credential()

        outcome = wizard.submit_form()

        assert isinstance(outcome.error, MissingCredentialError)
        assert wizard.state.step == Step.FORM_ENTRY

    def test_submit_from_wrong_step(self, wizard):
        with pytest.raises(InvalidStepError):
            wizard.submit_form()


class TestBusyGuard:

    def test_transition_is_inert_while_busy(self, wizard, completion):
        wizard.set_document_prompt("Invoice")
        wizard.state.busy = True

        assert wizard.submit_description() is None
        assert completion.calls == []
        assert wizard.state.step == Step.DESCRIPTION

    def test_busy_is_set_during_the_call(self, store):
        seen = []

        class InspectingGenerator:
            def generate_fields(self, credential, prompt):
                seen.append(wizard.state.busy)
                assert wizard.submit_description() is None
                return [FieldSpec("A", "text")]

        wizard = Wizard(store, field_generator=InspectingGenerator(), document_generator=object())
        wizard.set_document_prompt("Invoice")

        assert wizard.submit_description().ok
        assert seen == [True]
        assert wizard.state.busy is False

    def test_concurrent_submits_start_one_call(self, store):
        started = threading.Event()
        release = threading.Event()
        calls = []

        class BlockingGenerator:
            def generate_fields(self, credential, prompt):
                calls.append(prompt)
                started.set()
                release.wait(timeout=5)
                return [FieldSpec("A", "text")]

        wizard = Wizard(store, field_generator=BlockingGenerator(), document_generator=object())
        wizard.set_document_prompt("Invoice")
        results = []
        worker = threading.Thread(target=lambda: results.append(wizard.submit_description()))
        worker.start()
        assert started.wait(timeout=5)

        second = wizard.submit_description()
        release.set()
        worker.join(timeout=5)

        assert second is None
        assert calls == ["Invoice"]
        assert results[0].ok
        assert wizard.state.step == Step.FORM_ENTRY
        assert wizard.state.busy is False

    def test_unexpected_error_clears_busy_and_propagates(self, wizard, completion):
        completion.queue(RuntimeError("boom"))
        wizard.set_document_prompt("Invoice")

        with pytest.raises(RuntimeError):
            wizard.submit_description()

        assert wizard.state.busy is False
        assert wizard.state.step == Step.DESCRIPTION


class TestReset:

    @pytest.mark.parametrize("advance", [None, _to_form_entry, _to_result])
    def test_reset_returns_to_initial_state(self, wizard, completion, store, advance):
        if advance is not None:
            advance(wizard, completion)

        wizard.reset()

        assert wizard.state == WizardState()
        assert store.load() == "sk-test"

    def test_reset_clears_error(self, wizard):
        wizard.set_document_prompt("")
        wizard.submit_description()
        assert wizard.state.error_message

        wizard.reset()

        assert wizard.state.error_message is None

    def test_late_result_after_reset_is_discarded(self, store):
        class ResettingGenerator:
            def generate_fields(self, credential, prompt):
                wizard.reset()
                return [FieldSpec("A", "text")]

        wizard = Wizard(store, field_generator=ResettingGenerator(), document_generator=object())
        wizard.set_document_prompt("Invoice")

        outcome = wizard.submit_description()

        assert outcome.ok
        assert wizard.state == WizardState()
