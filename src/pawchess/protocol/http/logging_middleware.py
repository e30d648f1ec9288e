from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
GAMES_PREFIX = "/api/games/"


def game_id_from_path(path: str) -> Optional[str]:
    """Extract the game id from ``/api/games/{game_id}[/...]`` paths."""
    if not path.startswith(GAMES_PREFIX):
        return None
    game_id = path[len(GAMES_PREFIX):].split("/", 1)[0]
    return game_id or None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it against the game it touches.

    A caller-supplied ``x-request-id`` is reused so the board UI can match
    its own logs; otherwise a UUID is generated. Health probes log at DEBUG,
    server errors at WARNING.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        path = request.url.path
        context: Dict[str, object] = {"request_id": request_id}
        game_id = game_id_from_path(path)
        if game_id is not None:
            context["game_id"] = game_id
        quiet = path == "/healthz"

        logger.log(
            logging.DEBUG if quiet else logging.INFO,
            "%s %s",
            request.method,
            path,
            extra=context,
        )

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id

        if response.status_code >= 500:
            level = logging.WARNING
        else:
            level = logging.DEBUG if quiet else logging.INFO
        logger.log(
            level,
            "-> %d",
            response.status_code,
            extra={**context, "duration_ms": int((time.perf_counter() - start) * 1000)},
        )
        return response
