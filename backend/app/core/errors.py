class SupportTriageError(Exception):
    """Base class for errors surfaced by the triage services."""


class NotFoundError(SupportTriageError):
    def __init__(self, email_id: str):
        super().__init__(f"Email not found: {email_id}")
        self.email_id = email_id


class ValidationError(SupportTriageError):
    """Raised before processing when required input is missing or invalid."""


class StoreError(SupportTriageError):
    """The key-value store operation itself failed. Fatal for the request."""
