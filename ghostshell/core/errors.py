"""Error taxonomy shared by the transport, storage and session layers."""


class GhostshellError(Exception):
    """Base class for every error reported to the user as a status line."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class TransportError(GhostshellError):
    """Network, DNS or HTTP failure from the underlying transport."""


class ResponseFormatError(GhostshellError):
    """The server answered but the body is not the JSON shape we expect."""


class UserInputError(GhostshellError):
    """Invalid command, menu choice or settings value."""


class PersistenceError(GhostshellError):
    """A config, session or prompt file could not be read or written."""
