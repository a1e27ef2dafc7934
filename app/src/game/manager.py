"""
Session manager for the Empire word game.

Owns the single game session and enforces the phase rules:
setup → submission → playing, plus the two resets. Word admission checks
uniqueness locally and asks the similarity oracle about near-duplicates.

Every mutating operation runs under one asyncio lock, including the time
spent awaiting the oracle or the validator, so requests never interleave
their changes to the session. Reads never await, so they always see a
consistent session without taking the lock.
"""

import asyncio
import logging
import random
from typing import Dict, List, Optional

from configs.config import get_config
from src.game.constants import MSG_ROUND_ALREADY_STARTED, Phase
from src.game.errors import (
    DuplicatePlayer,
    DuplicateWord,
    InsufficientPlayers,
    InvalidCredential,
    MissingField,
    NotStarted,
    PhaseMismatch,
    SimilarWord,
)
from src.game.session import Session, Submission
from src.llm.similarity import GroqSimilarityOracle
from src.llm.validator import GroqSecretValidator

logger = logging.getLogger(__name__)

cfg = get_config()


class SessionManager:
    """Phase-gated operations over one in-memory session."""

    def __init__(
        self,
        validator=None,
        oracle=None,
        rng: Optional[random.Random] = None,
        min_players: int = cfg.MIN_PLAYERS,
    ) -> None:
        self._validator = validator or GroqSecretValidator()
        self._oracle = oracle or GroqSimilarityOracle()
        self._rng = rng or random.SystemRandom()
        self._min_players = min_players
        self._lock = asyncio.Lock()
        self._session = Session()

    @property
    def session(self) -> Session:
        return self._session

    # ── Host setup ───────────────────────────────────────────────────────

    async def configure_secret(self, candidate: str) -> None:
        """Validate and store the shared API key, opening submissions."""
        async with self._lock:
            try:
                valid = await self._validator.validate(candidate)
            except Exception as exc:
                logger.warning("Key validation failed: %s", exc)
                valid = False

            if not valid:
                logger.info(
                    "Rejected API key in phase %s", self._session.phase.value
                )
                raise InvalidCredential()

            self._session.secret = candidate
            self._session.shuffled_words = []
            self._session.phase = Phase.SUBMISSION
            logger.info("API key configured; accepting submissions")

    # ── Player submissions ───────────────────────────────────────────────

    async def submit_word(self, player_name: str, word: str) -> int:
        """Admit one word for a player and return the submission count."""
        async with self._lock:
            session = self._session
            if session.phase != Phase.SUBMISSION:
                raise PhaseMismatch()

            clean_name = (player_name or "").strip()
            clean_word = (word or "").strip().casefold()
            if not clean_name or not clean_word:
                raise MissingField()

            if session.has_player(clean_name):
                raise DuplicatePlayer(clean_name)

            if session.has_word(clean_word):
                raise DuplicateWord()

            existing = session.words
            if existing and session.secret:
                try:
                    verdict = await self._oracle.classify(
                        clean_word, existing, session.secret
                    )
                except Exception as exc:
                    logger.warning("Similarity check failed: %s", exc)
                    verdict = None

                if verdict is None:
                    logger.warning(
                        "Similarity check unavailable; accepting %r",
                        clean_word,
                    )
                elif verdict.is_similar:
                    logger.info(
                        "Rejected %r as similar to %r: %s",
                        clean_word, verdict.similar_to, verdict.reason,
                    )
                    raise SimilarWord(verdict.similar_to, verdict.reason)

            session.submissions.append(Submission(clean_name, clean_word))
            count = len(session.submissions)
            logger.info(
                "Player %s submitted a word (%d total)", clean_name, count
            )
            return count

    # ── Round control ────────────────────────────────────────────────────

    async def start_round(self) -> None:
        """Lock in submissions and shuffle the words once."""
        async with self._lock:
            session = self._session
            if len(session.submissions) < self._min_players:
                raise InsufficientPlayers(self._min_players)
            if session.phase != Phase.SUBMISSION:
                raise PhaseMismatch(MSG_ROUND_ALREADY_STARTED)

            words = session.words
            self._rng.shuffle(words)
            session.shuffled_words = words
            session.phase = Phase.PLAYING
            logger.info("Round started with %d words", len(words))

    def get_words(self) -> List[str]:
        if self._session.phase != Phase.PLAYING:
            raise NotStarted()
        return list(self._session.shuffled_words)

    def get_attribution(self) -> List[Submission]:
        """Words with their authors, in submission order (host reveal)."""
        if self._session.phase != Phase.PLAYING:
            raise NotStarted()
        return list(self._session.submissions)

    # ── Resets ───────────────────────────────────────────────────────────

    async def new_round(self) -> None:
        """Clear words and reopen submissions, keeping the API key."""
        async with self._lock:
            secret = self._session.secret
            self._session = Session(phase=Phase.SUBMISSION, secret=secret)
            logger.info("New round; accepting submissions")

    async def full_reset(self) -> None:
        """Back to setup, forgetting the API key."""
        async with self._lock:
            self._session = Session()
            logger.info("Full reset; waiting for API key")

    # ── Status ───────────────────────────────────────────────────────────

    def get_status(self) -> Dict:
        """Phase and counts for polling clients. Never exposes the key."""
        return {
            "phase": self._session.phase,
            "submission_count": len(self._session.submissions),
            "has_secret": self._session.secret is not None,
        }
