"""
Shared utility functions and singletons used across multiple modules.
"""

import logging
import socket
from functools import lru_cache

from slowapi import Limiter
from slowapi.util import get_remote_address

from configs.config import get_config

logger = logging.getLogger(__name__)

cfg = get_config()

# ── Shared rate-limiter instance ─────────────────────────────────────────
# Created here (not in main.py) so that route modules can import it
# without a circular dependency.
limiter = Limiter(
    key_func=get_remote_address, enabled=cfg.RATE_LIMIT_ENABLED
)


@lru_cache(maxsize=1)
def get_local_ip() -> str:
    """
    Return this machine's LAN IPv4 address, or ``localhost``.

    Connecting a UDP socket sends no packets; it only makes the OS pick the
    outbound interface, whose address is what players on the LAN can reach.
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("10.255.255.255", 1))
            address = sock.getsockname()[0]
    except OSError as exc:
        logger.warning("Could not determine LAN address: %s", exc)
        return "localhost"

    if address.startswith("127."):
        return "localhost"
    return address


def get_player_url() -> str:
    """URL players should open, shown on the host screen."""
    if cfg.RENDER_EXTERNAL_URL:
        return cfg.RENDER_EXTERNAL_URL
    if cfg.PUBLIC_URL:
        return cfg.PUBLIC_URL
    return f"http://{get_local_ip()}:{cfg.PORT}"
