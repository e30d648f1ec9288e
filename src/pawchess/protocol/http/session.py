from __future__ import annotations

import threading
import uuid
from typing import Callable, Dict, Optional

from ...play.controller import ChessController


ControllerFactory = Callable[[], ChessController]


class InMemorySessionStore:
    """Thread-safe in-memory store of chess games, one controller per game.

    Responsibilities:
    - Create new sessions with unique `game_id`s
    - Retrieve existing sessions by `game_id`
    - Delete sessions
    """

    def __init__(self, factory: ControllerFactory = ChessController) -> None:
        self._lock = threading.RLock()
        self._factory = factory
        self._games: Dict[str, ChessController] = {}

    def create(self) -> str:
        """Create a new game session and return its `game_id`."""
        gid = str(uuid.uuid4())
        controller = self._factory()
        with self._lock:
            self._games[gid] = controller
        return gid

    def get(self, game_id: str) -> Optional[ChessController]:
        with self._lock:
            return self._games.get(game_id)

    def delete(self, game_id: str) -> bool:
        """Drop a session; return False if it did not exist."""
        with self._lock:
            return self._games.pop(game_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
