"""
Exceptions raised by the domain and service layers.

All of them are fatal to the call that raised them: rule evaluation is deterministic, so retrying makes no sense.
The layer above (UI / API) decides how to present them to the user.
"""


class ChessError(Exception):
    """Base class for everything this package raises on purpose."""


class InvalidCoordinateError(ChessError):
    """A row or column outside of the board."""


class MissingKingError(ChessError):
    """Check detection was asked for a side that has no king on the board."""


class IllegalMoveError(ChessError):
    """The requested move is not (pseudo-)legal in the current position."""


class GameStateError(ChessError):
    """The game is in a state where the requested action is not allowed (ex. it is already over)."""


class InvalidRequestError(ChessError):
    """Boundary-layer validation failed."""
