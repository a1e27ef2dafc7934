"""
Empire word game API routes.

Endpoints:
    GET  /api/status            — phase, submission count, player URL
    POST /api/configure-secret  — validate and store the Groq API key (host)
    POST /api/submit            — submit a player's word
    POST /api/start-round       — lock submissions and shuffle (host)
    GET  /api/words             — shuffled, anonymous word list
    GET  /api/attribution       — words with their authors (host reveal)
    POST /api/new-round         — clear words, keep the API key (host)
    POST /api/full-reset        — back to setup, forget the API key (host)

Host-only endpoints are a convention of the frontend; the server does not
tell hosts and players apart.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field

from commons import get_player_url, limiter
from configs.config import get_config
from security import safe_error_response
from src.game.constants import MSG_KEY_REQUIRED
from src.game.errors import SessionError
from src.game.manager import SessionManager

logger = logging.getLogger(__name__)

cfg = get_config()

router = APIRouter(prefix="/api", tags=["game"])


def get_session_manager(request: Request) -> SessionManager:
    """Dependency returning the app's single session manager."""
    return request.app.state.session_manager


# ── Pydantic request bodies ─────────────────────────────────────────────
# Fields are optional so that a missing value reaches the game rules and
# is reported with the game's own message.


class ConfigureSecretRequest(BaseModel):
    key: Optional[str] = Field(
        default=None, max_length=cfg.SECRET_MAX_LENGTH,
    )


class SubmitWordRequest(BaseModel):
    player: Optional[str] = Field(
        default=None, max_length=cfg.PLAYER_NAME_MAX_LENGTH,
    )
    word: Optional[str] = Field(
        default=None, max_length=cfg.WORD_MAX_LENGTH,
    )


# ── Endpoints ────────────────────────────────────────────────────────────


@router.get("/status")
@limiter.limit("240/minute")
async def get_status(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Current phase and counts. Never exposes the API key."""
    try:
        status = manager.get_status()
        return {
            "phase": status["phase"].value,
            "submissionCount": status["submission_count"],
            "hasSecret": status["has_secret"],
            "playerUrl": get_player_url(),
        }
    except Exception as exc:
        safe_error_response(exc, context="get_status")


@router.post("/configure-secret")
@limiter.limit("10/minute")
async def configure_secret(
    request: Request,
    body: ConfigureSecretRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Validate the Groq API key and open submissions."""
    key = (body.key or "").strip()
    if not key:
        raise HTTPException(status_code=400, detail=MSG_KEY_REQUIRED)
    try:
        await manager.configure_secret(key)
        logger.info("Host configured the API key")
        return {"ok": True}
    except SessionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        safe_error_response(exc, context="configure_secret")


@router.post("/submit")
@limiter.limit("30/minute")
async def submit_word(
    request: Request,
    body: SubmitWordRequest,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Submit one word for a player."""
    try:
        count = await manager.submit_word(body.player, body.word)
        return {"ok": True, "playerCount": count}
    except SessionError as exc:
        logger.info("Submission rejected: %s", exc.message)
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        safe_error_response(exc, context="submit_word")


@router.post("/start-round")
@limiter.limit("10/minute")
async def start_round(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Start the round: shuffle the submitted words once."""
    try:
        await manager.start_round()
        return {"ok": True}
    except SessionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        safe_error_response(exc, context="start_round")


@router.get("/words")
@limiter.limit("240/minute")
async def get_words(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Shuffled words without player names."""
    try:
        return {"words": manager.get_words()}
    except SessionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        safe_error_response(exc, context="get_words")


@router.get("/attribution")
@limiter.limit("60/minute")
async def get_attribution(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Words with their authors, for the host's reveal."""
    try:
        return {
            "attribution": [s.to_dict() for s in manager.get_attribution()]
        }
    except SessionError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)
    except Exception as exc:
        safe_error_response(exc, context="get_attribution")


@router.post("/new-round")
@limiter.limit("20/minute")
async def new_round(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Clear the words and reopen submissions, keeping the API key."""
    try:
        await manager.new_round()
        return {"ok": True}
    except Exception as exc:
        safe_error_response(exc, context="new_round")


@router.post("/full-reset")
@limiter.limit("10/minute")
async def full_reset(
    request: Request,
    manager: SessionManager = Depends(get_session_manager),
) -> dict:
    """Return to setup and forget the API key."""
    try:
        await manager.full_reset()
        return {"ok": True}
    except Exception as exc:
        safe_error_response(exc, context="full_reset")
