class StoreError(Exception):
    """Base class for errors raised by the notes store."""


class RegistrationFailed(StoreError):
    """Account could not be created. Deliberately says nothing about why."""

    def __init__(self, message="Registration failed"):
        super().__init__(message)


class ValidationFailed(StoreError):
    """Input rejected before reaching the database (blank title, bad role...)."""
