"""
Recoverable, user-facing game errors.

Each error carries the HTTP status the transport layer should answer with
and the message shown to the player or host. None of them are fatal.
"""

from typing import Optional

from src.game.constants import (
    MSG_DUPLICATE_PLAYER,
    MSG_DUPLICATE_WORD,
    MSG_INSUFFICIENT_PLAYERS,
    MSG_INVALID_KEY,
    MSG_MISSING_FIELD,
    MSG_NOT_ACCEPTING,
    MSG_NOT_STARTED,
    MSG_SIMILAR_WORD,
)


class SessionError(Exception):
    """Base class for errors raised by the session manager."""

    status_code = 400
    default_message = "Request could not be completed."

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredential(SessionError):
    status_code = 401
    default_message = MSG_INVALID_KEY


class PhaseMismatch(SessionError):
    default_message = MSG_NOT_ACCEPTING


class MissingField(SessionError):
    default_message = MSG_MISSING_FIELD


class DuplicatePlayer(SessionError):
    def __init__(self, player: str) -> None:
        self.player = player
        super().__init__(MSG_DUPLICATE_PLAYER.format(player=player))


class DuplicateWord(SessionError):
    default_message = MSG_DUPLICATE_WORD


class SimilarWord(SessionError):
    """
    The similarity check matched an earlier word.

    ``similar_to`` and ``reason`` come from the oracle and are only used for
    logging; the player sees the generic message so earlier words stay secret.
    """

    default_message = MSG_SIMILAR_WORD

    def __init__(
        self, similar_to: Optional[str] = None, reason: str = ""
    ) -> None:
        self.similar_to = similar_to
        self.reason = reason
        super().__init__()


class InsufficientPlayers(SessionError):
    def __init__(self, min_players: int = 2) -> None:
        self.min_players = min_players
        super().__init__(
            MSG_INSUFFICIENT_PLAYERS.format(min_players=min_players)
        )


class NotStarted(SessionError):
    default_message = MSG_NOT_STARTED
