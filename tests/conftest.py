"""
Pytest fixtures for the Empire game server tests.
"""

import asyncio
import random
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from src.game.manager import SessionManager
from src.llm.similarity import SimilarityVerdict


class FakeValidator:
    """Secret validator that accepts or rejects every key."""

    def __init__(self, valid: bool = True, error=None) -> None:
        self.valid = valid
        self.error = error
        self.calls: List[str] = []

    async def validate(self, candidate: str) -> bool:
        self.calls.append(candidate)
        if self.error is not None:
            raise self.error
        return self.valid


class FakeOracle:
    """
    Similarity oracle with canned answers.

    ``verdicts`` maps a candidate word to its verdict; unknown words get
    ``default`` (``None`` means the oracle is unavailable). ``error`` is
    raised from every call instead.
    """

    def __init__(
        self,
        verdicts: Optional[Dict[str, Optional[SimilarityVerdict]]] = None,
        default: Optional[SimilarityVerdict] = None,
        delay: float = 0.0,
        error=None,
    ) -> None:
        self.verdicts = verdicts or {}
        self.default = default
        self.delay = delay
        self.error = error
        self.calls: List[tuple] = []

    async def classify(self, candidate, existing_words, credential):
        self.calls.append((candidate, list(existing_words), credential))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.verdicts.get(candidate, self.default)


class FakeGroqClient:
    """Stands in for ``AsyncOpenAI`` as returned by the client factory."""

    def __init__(self, content: Optional[str] = None, error=None) -> None:
        self.content = content
        self.error = error
        self.requests: List[dict] = []
        self.closed = False
        self.chat = SimpleNamespace(
            completions=SimpleNamespace(create=self._create)
        )
        self.models = SimpleNamespace(list=self._list_models)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True
        return False

    async def _create(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    async def _list_models(self):
        self.requests.append({"endpoint": "models"})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(id="llama-3.3-70b-versatile")])


def similar(to: str, reason: str = "same thing") -> SimilarityVerdict:
    return SimilarityVerdict(is_similar=True, similar_to=to, reason=reason)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def validator() -> FakeValidator:
    return FakeValidator()


@pytest.fixture
def oracle() -> FakeOracle:
    return FakeOracle()


@pytest.fixture
def manager(validator: FakeValidator, oracle: FakeOracle) -> SessionManager:
    """A manager in setup phase with fake collaborators."""
    return SessionManager(
        validator=validator, oracle=oracle, rng=random.Random(1234)
    )


@pytest.fixture
def open_manager(manager: SessionManager) -> SessionManager:
    """A manager whose API key is configured (submission phase)."""
    run(manager.configure_secret("gsk_test"))
    return manager
