"""
Centralized configuration loader.

Reads the ENVIRONMENT env-var and merges the correct environment module
(config_prod or config_local) into a single settings namespace.

Usage:
    from configs.config import get_config
    cfg = get_config()
    print(cfg.GROQ_MODEL_NAME)
"""

import os
import importlib
import logging
from types import SimpleNamespace

logger = logging.getLogger(__name__)

# ── Environment detection ────────────────────────────────────────────────
ENVIRONMENT = os.getenv("ENVIRONMENT", "production")

# ── Server ───────────────────────────────────────────────────────────────
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))

# Player-facing URL shown on the host screen. When deployed (Render etc.)
# the public URL wins; locally the LAN address is used.
RENDER_EXTERNAL_URL = os.getenv("RENDER_EXTERNAL_URL", "")
PUBLIC_URL = os.getenv("PUBLIC_URL", "")

# Proxies trusted to report the client address in X-Forwarded-For; rate
# limits key on that address. Render fronts every request with its own proxy.
FORWARDED_ALLOW_IPS = os.getenv(
    "FORWARDED_ALLOW_IPS", "*" if RENDER_EXTERNAL_URL else "127.0.0.1"
)

# Static frontend, mounted at "/" when the directory exists
PUBLIC_DIR = os.getenv(
    "PUBLIC_DIR",
    os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(
        os.path.abspath(__file__)
    ))), "public"),
)

# ── Groq (OpenAI-compatible) ─────────────────────────────────────────────
GROQ_API_BASE = "https://api.groq.com/openai/v1"
GROQ_MODEL_NAME = "llama-3.3-70b-versatile"
SIMILARITY_TEMPERATURE = 0.3
SIMILARITY_MAX_TOKENS = 200
SIMILARITY_TIMEOUT_SECONDS = 10.0
SECRET_VALIDATION_TIMEOUT_SECONDS = 10.0

# ── Game rules ───────────────────────────────────────────────────────────
MIN_PLAYERS = 2
PLAYER_NAME_MAX_LENGTH = 30
WORD_MAX_LENGTH = 60
SECRET_MAX_LENGTH = 256

# ── HTTP surface ─────────────────────────────────────────────────────────
CORS_METHODS = ["GET", "POST", "OPTIONS"]
CORS_HEADERS = [
    "Accept",
    "Accept-Language",
    "Content-Type",
    "Origin",
    "X-Requested-With",
    "X-Request-ID",
]
RATE_LIMIT_ENABLED = True

# Logging
LOG_FILE_APP = "app.log"
LOG_FILE_ERRORS = "errors.log"
LOG_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_BACKUP_COUNT = 5


# ── Config loader ────────────────────────────────────────────────────────

_config_cache = None


def get_config() -> SimpleNamespace:
    """
    Return a merged configuration namespace.

    Environment-specific values from config_local or config_prod
    override the shared defaults defined above.
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    # Start with all module-level constants
    base = {
        key: value
        for key, value in globals().items()
        if key.isupper() and not key.startswith("_")
    }

    # Overlay environment-specific settings
    env_module_name = (
        "configs.config_local" if ENVIRONMENT == "development"
        else "configs.config_prod"
    )
    try:
        env_module = importlib.import_module(env_module_name)
        for key in dir(env_module):
            if key.isupper():
                base[key] = getattr(env_module, key)
        logger.info("Loaded configuration from %s", env_module_name)
    except ImportError:
        logger.warning(
            "Environment config '%s' not found; using shared defaults.",
            env_module_name,
        )

    _config_cache = SimpleNamespace(**base)
    return _config_cache
