"""
Export helpers for the generated markup: download filename and print-ready page.
"""
import html
import re

DEFAULT_FILENAME = "document"
HTML_EXTENSION = ".html"
PRINT_STYLESHEET = """@media print { hr { page-break-after: always; } }
body { font-family: Arial, sans-serif; margin: 20px; }"""

_HEADING_PATTERNS = (
    re.compile(r"<h1[^>]*>(.*?)</h1>", re.I | re.S),
    re.compile(r"<h2[^>]*>(.*?)</h2>", re.I | re.S),
)
_LINE_BREAK_TAG = re.compile(r"<br\s*/?>", re.I)
_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE = re.compile(r"\s+")
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f\x7f]')


def derive_filename(markup: str) -> str:
    """
    Name from the first <h1> (else <h2>) text on one line, without path-unsafe or control
    characters; DEFAULT_FILENAME if nothing usable is left.
    """
    name = ""
    for pattern in _HEADING_PATTERNS:
        m = pattern.search(markup or "")
        if m:
            name = _TAG_PATTERN.sub("", _LINE_BREAK_TAG.sub(" ", m.group(1)))
            name = _WHITESPACE.sub(" ", name)
            break
    name = _UNSAFE_CHARS.sub("", name).strip()
    return name or DEFAULT_FILENAME


def html_filename(markup: str) -> str:
    return derive_filename(markup) + HTML_EXTENSION


def build_print_document(markup: str, auto_print: bool = True) -> str:
    """Wrap the markup in a minimal page with the print stylesheet; optionally open the print dialog on load."""
    script = "\n    <script>window.onload = function () { window.print(); };</script>" if auto_print else ""
    return f"""<html>
  <head>
    <meta charset="utf-8">
    <title>{html.escape(derive_filename(markup))}</title>
    <style>
{PRINT_STYLESHEET}
    </style>{script}
  </head>
  <body>
{markup}
  </body>
</html>
"""
