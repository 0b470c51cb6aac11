class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class WriteValidationError(ValidationError):
    """Raised for a malformed write (attendance or profile), before anything is sent."""


class TransientFetchError(DomainError):
    """Read from the remote store failed; the view falls back to empty/stale state."""


class RemoteWriteError(DomainError):
    """Remote upsert/delete was rejected or could not be sent."""


class RealtimeProtocolError(DomainError):
    """A realtime payload had an unrecognized shape."""


class SubscriptionTeardownError(DomainError):
    """Unsubscribing a realtime channel failed."""


class SubscriptionError(DomainError):
    """Opening a realtime channel failed; the view keeps working without live updates."""
