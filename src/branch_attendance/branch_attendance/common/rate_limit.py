from __future__ import annotations

import logging

from flask import Flask, current_app, jsonify, request
from flask_limiter import Limiter, RateLimitExceeded
from flask_limiter.util import get_remote_address

from ..core.constants import DEFAULT_VALIDATE_RATE_LIMIT

logger = logging.getLogger(__name__)


def build_limiter(app: Flask) -> Limiter:
    """Per-client-IP limiter; only routes decorated with `limit` are throttled."""
    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri=app.config.get("RATELIMIT_STORAGE_URI", "memory://"),
        default_limits=[],
    )

    @app.errorhandler(RateLimitExceeded)
    def handle_rate_limited(exc: RateLimitExceeded):
        logger.warning("%s rate limited for %s (%s)", request.path, get_remote_address(), exc.description)
        body = {"valid": False, "code": "RATE_LIMITED", "message": "Too many requests, try again in a minute."}
        return jsonify(body), 429

    return limiter


def validate_limit() -> str:
    return current_app.config.get("VALIDATE_RATE_LIMIT") or DEFAULT_VALIDATE_RATE_LIMIT
