"""
Groq client factory.

Groq exposes an OpenAI-compatible API, so the official ``openai`` SDK is
pointed at the Groq base URL. A client is built per call because the key is
only known at runtime (it is the host's shared secret).
"""

from openai import AsyncOpenAI

from configs.config import get_config

cfg = get_config()


def make_groq_client(api_key: str, timeout: float) -> AsyncOpenAI:
    """Return an async Groq client with a bounded timeout and no retries."""
    return AsyncOpenAI(
        api_key=api_key,
        base_url=cfg.GROQ_API_BASE,
        timeout=timeout,
        max_retries=0,
    )
