"""
Data types shared by the generators and the wizard: field specs, form data and wizard state.
"""
from dataclasses import dataclass, field
from enum import IntEnum

# Field name -> value as typed by the user. Not validated against the schema.
FormData = dict[str, str]


@dataclass(frozen=True)
class FieldSpec:
    """One input inferred from the document description. type is an open string ("text", "date", ...)."""

    name: str
    type: str | None = None

    @property
    def is_date(self) -> bool:
        return (self.type or "").strip().lower() == "date"

    def to_dict(self) -> dict:
        data = {"name": self.name}
        if self.type is not None:
            data["type"] = self.type
        return data

    @classmethod
    def from_item(cls, item) -> "FieldSpec":
        """Build from one element of the parsed JSON array. Non-objects are shown by their string form."""
        if isinstance(item, dict):
            name = item.get("name")
            kind = item.get("type")
            return cls(
                name="" if name is None else str(name),
                type=None if kind is None else str(kind),
            )
        return cls(name=str(item), type=None)


class Step(IntEnum):
    DESCRIPTION = 1
    FORM_ENTRY = 2
    RESULT = 3


@dataclass
class WizardState:
    step: Step = Step.DESCRIPTION
    document_prompt: str = ""
    field_schema: list[FieldSpec] | None = None
    form_data: FormData = field(default_factory=dict)
    document_markup: str | None = None
    error_message: str | None = None
    busy: bool = False

    def to_dict(self) -> dict:
        return {
            "step": int(self.step),
            "step_name": self.step.name.lower(),
            "document_prompt": self.document_prompt,
            "field_schema": None if self.field_schema is None else [f.to_dict() for f in self.field_schema],
            "form_data": dict(self.form_data),
            "document_markup": self.document_markup,
            "error_message": self.error_message,
            "busy": self.busy,
        }
