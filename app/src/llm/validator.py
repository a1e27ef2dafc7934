"""
Secret validation against the Groq API.

A key is valid when an authorized ``GET /models`` succeeds. Any failure,
including network errors and timeouts, counts as invalid (fail closed).
"""

import logging
from typing import Callable

from openai import AsyncOpenAI

from configs.config import get_config
from src.llm.client import make_groq_client

logger = logging.getLogger(__name__)

cfg = get_config()


class GroqSecretValidator:
    """Checks whether a candidate API key is accepted by Groq."""

    def __init__(
        self,
        client_factory: Callable[[str, float], AsyncOpenAI] = make_groq_client,
        timeout: float = cfg.SECRET_VALIDATION_TIMEOUT_SECONDS,
    ) -> None:
        self._client_factory = client_factory
        self._timeout = timeout

    async def validate(self, candidate: str) -> bool:
        try:
            async with self._client_factory(candidate, self._timeout) as client:
                await client.models.list()
        except Exception as exc:
            logger.warning(
                "API key validation failed: %s", type(exc).__name__
            )
            return False

        logger.info("API key validated")
        return True
