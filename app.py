"""
Web API for the document wizard (Flask). The wizard endpoints live in the blueprint at /wizard.
Run: python run_flask.py  then call http://127.0.0.1:5000/wizard/api/state
For the interactive UI run: streamlit run docwizard/app.py
"""
import logging
import sys
from pathlib import Path

from flask import Flask, jsonify

# Allow importing docwizard from a source checkout
_root = Path(__file__).resolve().parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from docwizard.config import Config, configure_logging
from docwizard.credential_store import FileCredentialStore
from docwizard.llm_client import CompletionClient
from wizard_bp import EXTENSION_KEY, wizard_bp

logger = logging.getLogger(__name__)


def create_app(config: Config | None = None, credential_store=None, completion_client=None) -> Flask:
    """
    Build the Flask app. The credential store and completion client are shared by every
    session in the process; pass fakes here for tests.
    """
    cfg = config or Config()
    app = Flask(__name__)
    app.config["SECRET_KEY"] = cfg.SECRET_KEY
    app.config["MAX_CONTENT_LENGTH"] = 1 * 1024 * 1024  # 1 MB max request body
    app.extensions[EXTENSION_KEY] = {
        "credential_store": credential_store or FileCredentialStore(cfg.CREDENTIAL_FILE),
        "completion_client": completion_client or CompletionClient(cfg),
        "session_ttl": cfg.SESSION_TTL,
        "sessions": {},
    }
    app.register_blueprint(wizard_bp)

    @app.route("/")
    def index():
        return jsonify({"service": "document-wizard", "api": "/wizard/api/state"})

    return app


if __name__ == "__main__":
    _cfg = Config()
    configure_logging(_cfg.LOG_LEVEL)
    logger.info("Starting document wizard API")
    create_app(_cfg).run(debug=True, port=5000, use_reloader=False)
