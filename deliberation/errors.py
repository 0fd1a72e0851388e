"""Error types raised by the deliberation and debate entry points."""


class DeliberationError(Exception):
    """Base class for errors surfaced to callers of the engine."""


class ValidationError(DeliberationError):
    """Caller misuse: too few participants or an invalid debate config.

    Raised before any network activity.
    """


class InsufficientResponsesError(DeliberationError):
    """Dispatch ran but fewer than the required number of models answered."""

    def __init__(self, received: int, required: int = 2) -> None:
        self.received = received
        self.required = required
        super().__init__(
            f"Only {received} successful responses (minimum {required} required)"
        )
