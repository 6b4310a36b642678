"""
Response normalization for completion text: strip markdown code fences, parse the field list JSON.
Encapsulated in a class (OOP) with module-level shortcuts.
"""
import json
import re

from docwizard.errors import FormatError
from docwizard.models import FieldSpec

FENCE_KINDS = ("json", "html")

_LEADING_FENCE = re.compile(r"\A```(?P<tag>[A-Za-z0-9_+.-]*)\s*")
_TRAILING_FENCE = re.compile(r"\s*```\s*\Z")


class ResponseNormalizer:
    """
    Turns raw completion text into the payload the wizard expects.
    Only one leading and one trailing fence are removed; the rest is left for the parser.
    """

    @staticmethod
    def strip_fence(raw: str, expected_kind: str) -> str:
        """
        Remove a leading ``` (bare or tagged with expected_kind) and a trailing ```.
        Text without a fence comes back unchanged.
        """
        if expected_kind not in FENCE_KINDS:
            raise ValueError(f"expected_kind must be one of {FENCE_KINDS}, got {expected_kind!r}")
        text = raw
        m = _LEADING_FENCE.match(text)
        if m and m.group("tag").lower() in ("", expected_kind):
            text = text[m.end():]
        m = _TRAILING_FENCE.search(text)
        if m:
            text = text[:m.start()]
        return text

    @staticmethod
    def parse_field_schema(text: str) -> list[FieldSpec]:
        """Parse a JSON array into FieldSpecs. Elements are not deep-validated."""
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            raise FormatError(f"The API response is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise FormatError("The API response is not a JSON array.")
        return [FieldSpec.from_item(item) for item in data]


def strip_fence(raw: str, expected_kind: str) -> str:
    return ResponseNormalizer.strip_fence(raw, expected_kind)


def parse_field_schema(text: str) -> list[FieldSpec]:
    return ResponseNormalizer.parse_field_schema(text)
