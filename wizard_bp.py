"""
Flask Blueprint for the document wizard: JSON API for the three steps, plus download and print views.
Mount at /wizard (e.g. /wizard/api/state, /wizard/download, /wizard/print).
One Wizard per browser session, kept in memory and keyed by a token in the signed session cookie.
"""
import secrets
import time
from urllib.parse import quote

from flask import Blueprint, Response, current_app, jsonify, request, session

from docwizard.errors import EmptyInputError, InvalidStepError
from docwizard.exporter import build_print_document, html_filename
from docwizard.wizard import Wizard

wizard_bp = Blueprint("wizard", __name__, url_prefix="/wizard")

# app.extensions key: { "credential_store", "completion_client", "session_ttl", "sessions": {token: {...}} }
EXTENSION_KEY = "docwizard"


def _ext() -> dict:
    return current_app.extensions[EXTENSION_KEY]


def _expire_old(sessions: dict, ttl: float) -> None:
    now = time.time()
    for token, entry in list(sessions.items()):
        if now - entry["touched"] > ttl:
            sessions.pop(token, None)


def _wizard() -> Wizard:
    """Return this session's Wizard, creating one on first use or after expiry."""
    ext = _ext()
    sessions = ext["sessions"]
    _expire_old(sessions, ext["session_ttl"])
    token = session.get("wizard_token")
    entry = sessions.get(token) if token else None
    if entry is None:
        token = secrets.token_urlsafe(12)
        session["wizard_token"] = token
        entry = {"wizard": Wizard(ext["credential_store"], completion_client=ext["completion_client"])}
        sessions[token] = entry
    entry["touched"] = time.time()
    return entry["wizard"]


def _state_payload(wizard: Wizard, **extra) -> dict:
    payload = {"state": wizard.state.to_dict(), "has_credential": wizard.has_credential}
    payload.update(extra)
    return payload


def _attachment_header(filename: str) -> str:
    """ASCII fallback name plus the RFC 5987 UTF-8 form."""
    fallback = filename.encode("ascii", "ignore").decode("ascii").replace("\"", "") or "document.html"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def _json_body() -> dict | None:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else None


def _transition(wizard: Wizard, submit):
    try:
        outcome = submit()
    except InvalidStepError as e:
        return jsonify(_state_payload(wizard, ok=False, error=str(e))), 409
    if outcome is None:
        return jsonify(_state_payload(wizard, ok=False, error="A request is already in progress.")), 409
    if not outcome.ok:
        return jsonify(_state_payload(wizard, ok=False, error=outcome.message)), 422
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/api/state")
def get_state():
    return jsonify(_state_payload(_wizard()))


@wizard_bp.route("/api/credential", methods=["POST"])
def save_credential():
    """Store the OpenAI API key for this process (persisted by the credential store)."""
    data = _json_body()
    if data is None or not isinstance(data.get("api_key"), str):
        return jsonify({"error": "Missing or invalid 'api_key' field"}), 400
    wizard = _wizard()
    try:
        wizard.save_credential(data["api_key"])
    except EmptyInputError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/api/credential", methods=["DELETE"])
def clear_credential():
    wizard = _wizard()
    wizard.clear_credential()
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/api/prompt", methods=["PUT"])
def set_prompt():
    data = _json_body()
    if data is None or not isinstance(data.get("document_prompt"), str):
        return jsonify({"error": "Missing or invalid 'document_prompt' field"}), 400
    wizard = _wizard()
    try:
        wizard.set_document_prompt(data["document_prompt"])
    except InvalidStepError as e:
        return jsonify({"error": str(e)}), 409
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/api/fields", methods=["POST"])
def generate_fields():
    """Step 1 -> 2: infer the form fields from the stored description."""
    wizard = _wizard()
    return _transition(wizard, wizard.submit_description)


@wizard_bp.route("/api/form", methods=["PATCH"])
def update_form():
    """Merge {field name: value} into the form. Values are stored as strings."""
    data = _json_body()
    if data is None:
        return jsonify({"error": "Expected a JSON object of field values"}), 400
    wizard = _wizard()
    try:
        for name, value in data.items():
            wizard.set_field_value(name, value)
    except InvalidStepError as e:
        return jsonify({"error": str(e)}), 409
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/api/document", methods=["POST"])
def generate_document():
    """Step 2 -> 3: render the HTML document from the description and the form."""
    wizard = _wizard()
    return _transition(wizard, wizard.submit_form)


@wizard_bp.route("/api/reset", methods=["POST"])
def reset():
    wizard = _wizard()
    wizard.reset()
    return jsonify(_state_payload(wizard, ok=True))


@wizard_bp.route("/download")
def download():
    """Return the generated markup as an .html attachment named after its first heading."""
    markup = _wizard().state.document_markup
    if not markup:
        return jsonify({"error": "No document has been generated yet"}), 404
    return Response(
        markup,
        mimetype="text/html",
        headers={"Content-Disposition": _attachment_header(html_filename(markup))},
    )


@wizard_bp.route("/print")
def print_view():
    """Serve the markup in a print-styled page that opens the print dialog on load."""
    markup = _wizard().state.document_markup
    if not markup:
        return jsonify({"error": "No document has been generated yet"}), 404
    return Response(build_print_document(markup), mimetype="text/html")
