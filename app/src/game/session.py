"""
In-memory state of the single live game session.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.game.constants import Phase


@dataclass(frozen=True)
class Submission:
    """One player's accepted word."""

    player: str
    word: str

    def to_dict(self) -> dict:
        return {"player": self.player, "word": self.word}


@dataclass
class Session:
    """
    All game state. Lives only in process memory.

    ``shuffled_words`` is filled once when the round starts and is
    non-empty only while ``phase`` is PLAYING.
    """

    phase: Phase = Phase.SETUP
    secret: Optional[str] = None
    submissions: List[Submission] = field(default_factory=list)
    shuffled_words: List[str] = field(default_factory=list)

    @property
    def words(self) -> List[str]:
        return [s.word for s in self.submissions]

    def has_player(self, player: str) -> bool:
        folded = player.casefold()
        return any(s.player.casefold() == folded for s in self.submissions)

    def has_word(self, word: str) -> bool:
        return any(s.word == word for s in self.submissions)
