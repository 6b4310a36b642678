"""
Streamlit UI for the document wizard: describe a document, fill in the generated form, download the HTML.
Run: streamlit run docwizard/app.py
Uses .env from the project root.
"""
import datetime
import sys
from pathlib import Path

import streamlit as st
import streamlit.components.v1 as components

# -------------------------
# Path setup
# -------------------------
_root = Path(__file__).resolve().parent.parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from docwizard.config import Config, configure_logging
from docwizard.credential_store import FileCredentialStore
from docwizard.errors import EmptyInputError
from docwizard.exporter import build_print_document, html_filename
from docwizard.llm_client import CompletionClient
from docwizard.models import FieldSpec, Step
from docwizard.wizard import Wizard


@st.cache_resource
def _services():
    """Process-wide config, credential store and client (shared by all browser sessions)."""
    cfg = Config()
    configure_logging(cfg.LOG_LEVEL)
    return FileCredentialStore(cfg.CREDENTIAL_FILE), CompletionClient(cfg)


def _wizard() -> Wizard:
    if "docwizard_wizard" not in st.session_state:
        store, client = _services()
        st.session_state["docwizard_wizard"] = Wizard(store, completion_client=client)
    return st.session_state["docwizard_wizard"]


def _date_value(raw: str):
    try:
        return datetime.date.fromisoformat(raw) if raw else None
    except ValueError:
        return None


def _field_input(wizard: Wizard, index: int, spec: FieldSpec) -> None:
    current = wizard.state.form_data.get(spec.name, "")
    key = f"docwizard_field_{index}"
    if spec.is_date:
        value = st.date_input(spec.name, value=_date_value(current), key=key)
        value = value.isoformat() if value else ""
    else:
        value = st.text_input(spec.name, value=current, key=key)
    if value != current:
        wizard.set_field_value(spec.name, value)


# -------------------------
# App config
# -------------------------
st.set_page_config(page_title="Document Generator", layout="centered")
st.title("Document Generator")

wizard = _wizard()
state = wizard.state

# -------------------------
# API key
# -------------------------
st.subheader("OpenAI API key")
if wizard.has_credential:
    col1, col2 = st.columns([3, 1])
    col1.write("Key saved.")
    if col2.button("Log out", type="secondary"):
        wizard.clear_credential()
        st.rerun()
else:
    api_key = st.text_input("Enter API key", type="password")
    if st.button("Save"):
        try:
            wizard.save_credential(api_key)
            st.rerun()
        except EmptyInputError as e:
            st.error(str(e))

# -------------------------
# Step 1 · Description
# -------------------------
if state.step == Step.DESCRIPTION:
    st.subheader("Document description")
    prompt = st.text_area("Describe the formal document", value=state.document_prompt, height=140)
    if prompt != state.document_prompt:
        wizard.set_document_prompt(prompt)
    if st.button("Generate field definitions", type="primary", disabled=state.busy, use_container_width=True):
        with st.spinner("Asking the model which fields this document needs…"):
            outcome = wizard.submit_description()
        if outcome is not None and outcome.ok:
            st.rerun()

# -------------------------
# Step 2 · Form entry
# -------------------------
elif state.step == Step.FORM_ENTRY and state.field_schema is not None:
    st.subheader("Enter the data")
    cols = st.columns(2)
    for i, spec in enumerate(state.field_schema):
        with cols[i % 2]:
            _field_input(wizard, i, spec)
    if st.button("Generate document", type="primary", disabled=state.busy, use_container_width=True):
        with st.spinner("Generating the document…"):
            outcome = wizard.submit_form()
        if outcome is not None and outcome.ok:
            st.rerun()

# -------------------------
# Step 3 · Result
# -------------------------
elif state.step == Step.RESULT and state.document_markup is not None:
    markup = state.document_markup
    st.subheader("Resulting HTML")
    st.text_area("HTML", value=markup, height=300, disabled=True, label_visibility="collapsed")
    col1, col2 = st.columns(2)
    col1.download_button(
        "Download .html",
        data=markup.encode("utf-8"),
        file_name=html_filename(markup),
        mime="text/html",
        use_container_width=True,
    )
    if col2.button("Print / export", use_container_width=True, help="Opens the browser print dialog."):
        # onload window.print() runs inside the embedded frame
        components.html(build_print_document(markup), height=600, scrolling=True)

if state.step != Step.DESCRIPTION:
    if st.button("Clear data and start over", use_container_width=True):
        wizard.reset()
        for key in [k for k in st.session_state if k.startswith("docwizard_field_")]:
            del st.session_state[key]
        st.rerun()

if wizard.state.error_message:
    st.error(wizard.state.error_message)
