"""
Error kinds raised by the wizard's services. Every one carries a human-readable message
that the wizard shows to the user as-is.
"""

MISSING_CREDENTIAL_MESSAGE = "No OpenAI API key is set. Please enter one."
EMPTY_PROMPT_MESSAGE = "Please enter a document description."
GENERIC_SERVICE_MESSAGE = "Error while communicating with the OpenAI API."


class WizardError(Exception):
    """Base class for expected, user-facing failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class MissingCredentialError(WizardError):
    def __init__(self, message: str = MISSING_CREDENTIAL_MESSAGE):
        super().__init__(message)


class EmptyInputError(WizardError):
    def __init__(self, message: str = EMPTY_PROMPT_MESSAGE):
        super().__init__(message)


class ServiceError(WizardError):
    """Transport failure or non-success response from the completion endpoint."""

    def __init__(self, message: str = GENERIC_SERVICE_MESSAGE, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FormatError(WizardError):
    """The completion response could not be read as the expected structure."""


class InvalidStepError(WizardError):
    """An operation was invoked from a step that does not allow it."""
