"""
Exceptions raised by the Nexus studio.

None of these are fatal to the process: the web layer and the CLI turn each
of them into a user-facing message.
"""


class StudioError(Exception):
    """Base class for studio errors."""


class CatalogError(StudioError):
    """A catalog file is missing or malformed."""


class IdentityIncompleteError(StudioError):
    """The identity stage is missing required fields."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Identity incomplete, missing: {', '.join(missing)}")


class EmptyRequestError(StudioError):
    """A chat submission had no text."""


class RequestInFlightError(StudioError):
    """A chat submission arrived while another one is still awaiting a response."""


class SessionClosedError(StudioError):
    """The chat session has been closed."""


class StageTransitionError(StudioError):
    """The studio cannot move to the requested stage from where it is."""
