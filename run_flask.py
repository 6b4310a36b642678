"""
Run the Flask app (document wizard API at /wizard).
Activate your venv first, then: python run_flask.py
"""
import sys
from pathlib import Path

# Ensure project root is on path
_root = Path(__file__).resolve().parent
if str(_root) not in sys.path:
    sys.path.insert(0, str(_root))

from app import create_app
from docwizard.config import Config, configure_logging

if __name__ == "__main__":
    cfg = Config()
    configure_logging(cfg.LOG_LEVEL)
    create_app(cfg).run(debug=True, port=5000, use_reloader=False)
