"""
Word similarity moderation for the Empire game.

Asks a Groq-hosted model whether a new word refers to the same thing as any
word already submitted. The check fails open: if Groq is unreachable or its
reply cannot be parsed, the caller gets ``None`` and accepts the word.
"""

import json
import logging
import re
from typing import Callable, List, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, ValidationError

from configs.config import get_config
from src.llm.client import make_groq_client

logger = logging.getLogger(__name__)

cfg = get_config()

_JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)


class SimilarityVerdict(BaseModel):
    is_similar: bool
    similar_to: Optional[str] = None
    reason: Optional[str] = ""


def build_similarity_prompt(new_word: str, existing_words: List[str]) -> str:
    """Render the judging prompt for one candidate word."""
    existing_list = ", ".join(f'"{w}"' for w in existing_words)
    return (
        "You are a word similarity checker for a party game called "
        '"Empire".\n'
        "Your job is to reject words that are TOO SIMILAR - only reject if "
        "they refer to the SAME concept or entity.\n\n"
        f'New word submitted: "{new_word}"\n'
        f"Existing words: {existing_list}\n\n"
        "Check if the new word is similar to ANY of the existing words. "
        "ONLY REJECT if:\n"
        '- Exact match or spelling variation (e.g., "color" vs "colour") '
        "→ REJECT\n"
        "- Same person/entity with minor variations (e.g., \"Kanye\" vs "
        '"Kanye West", "Taylor" vs "Taylor Swift") → REJECT\n'
        "- Nicknames, aliases, or stage names referring to the same "
        'person/thing (e.g., "Drake" vs "Drizzy", "The Rock" vs '
        '"Dwayne Johnson", "MJ" vs "Michael Jordan", "Bey" vs "Beyoncé") '
        "→ REJECT\n"
        '- Same concept phrased differently (e.g., "egg roll" and '
        '"spring roll" are both types of rolls) → REJECT\n'
        '- Obvious typos (e.g., "Chirs" vs "Chris") → REJECT\n'
        '- Abbreviations or acronyms for the same thing (e.g., "NBA" vs '
        '"National Basketball Association", "NYC" vs "New York City") '
        "→ REJECT\n\n"
        "DO NOT REJECT if:\n"
        "- Different people who share a first name (e.g., \"Chris Pratt\" "
        'vs "Chris Hemsworth") → ACCEPT\n'
        "- Different concepts that happen to share a word (e.g., "
        '"hot dog" vs "hot tub") → ACCEPT\n'
        '- Synonyms that are distinct enough (e.g., "happy" vs "joyful") '
        "→ ACCEPT\n\n"
        "Respond ONLY with valid JSON (no markdown, no extra text):\n"
        '{"is_similar": true/false, "similar_to": "word or null", '
        '"reason": "brief explanation"}'
    )


def parse_verdict(text: Optional[str]) -> Optional[SimilarityVerdict]:
    """
    Extract a verdict from the model's reply.

    Models sometimes wrap the JSON in prose or code fences, so the span from
    the first ``{`` to the last ``}`` is decoded. Returns ``None`` when
    nothing usable is found.
    """
    if not text:
        return None

    match = _JSON_BLOCK.search(text)
    if not match:
        logger.warning("Similarity reply contained no JSON object")
        return None

    try:
        data = json.loads(match.group(0))
        return SimilarityVerdict.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.warning("Unparseable similarity reply: %s", exc)
        return None


class GroqSimilarityOracle:
    """Classifies a candidate word against the words accepted so far."""

    def __init__(
        self,
        client_factory: Callable[[str, float], AsyncOpenAI] = make_groq_client,
        model: str = cfg.GROQ_MODEL_NAME,
        timeout: float = cfg.SIMILARITY_TIMEOUT_SECONDS,
    ) -> None:
        self._client_factory = client_factory
        self._model = model
        self._timeout = timeout

    async def classify(
        self,
        candidate: str,
        existing_words: List[str],
        credential: str,
    ) -> Optional[SimilarityVerdict]:
        """Return the model's verdict, or ``None`` if it is unavailable."""
        prompt = build_similarity_prompt(candidate, existing_words)
        logger.debug(
            "Similarity check for %r against %d words",
            candidate, len(existing_words),
        )

        try:
            async with self._client_factory(credential, self._timeout) as client:
                response = await client.chat.completions.create(
                    model=self._model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=cfg.SIMILARITY_TEMPERATURE,
                    max_tokens=cfg.SIMILARITY_MAX_TOKENS,
                )
            text = response.choices[0].message.content
        except Exception as exc:
            logger.error("Similarity check error: %s", exc)
            return None

        return parse_verdict(text)
