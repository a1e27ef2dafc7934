"""
Phase values and user-facing messages for the Empire word game.
"""

from enum import Enum


class Phase(str, Enum):
    SETUP = "setup"
    SUBMISSION = "submission"
    PLAYING = "playing"


# User-facing messages returned in the ``error`` field
MSG_KEY_REQUIRED = "Key required"
MSG_INVALID_KEY = "Invalid API key"
MSG_NOT_ACCEPTING = "Not accepting submissions right now."
MSG_ROUND_ALREADY_STARTED = "Round already started."
MSG_MISSING_FIELD = "Name and word are required."
MSG_DUPLICATE_PLAYER = "{player} has already submitted a word."
MSG_DUPLICATE_WORD = "That word has already been submitted. Try another!"
MSG_SIMILAR_WORD = (
    "Your word is too similar to a previously submitted word. Try another!"
)
MSG_INSUFFICIENT_PLAYERS = "Need at least {min_players} players."
MSG_NOT_STARTED = "Game not started yet."
