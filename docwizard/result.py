"""
Tagged outcome of a wizard transition: either a value or one of the WizardError kinds.
"""
from dataclasses import dataclass
from typing import Any, Callable

from docwizard.errors import WizardError


@dataclass(frozen=True)
class Outcome:
    value: Any = None
    error: WizardError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str | None:
        return None if self.error is None else str(self.error)

    @classmethod
    def success(cls, value: Any) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: WizardError) -> "Outcome":
        return cls(error=error)


def attempt(func: Callable[..., Any], *args, **kwargs) -> Outcome:
    """
    Call func and tag the result. Only WizardError becomes a failure;
    anything else is a bug and propagates.
    """
    try:
        return Outcome.success(func(*args, **kwargs))
    except WizardError as e:
        return Outcome.failure(e)
