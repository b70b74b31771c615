from __future__ import annotations

import logging
import threading
import uuid
from collections import OrderedDict
from typing import Optional

from ...engine.game import Game


logger = logging.getLogger(__name__)


class InMemorySessionStore:
    """Thread-safe, bounded in-memory game store.

    Sessions are kept in creation order; once ``max_sessions`` is exceeded the
    oldest session is dropped.
    """

    def __init__(self, max_sessions: int = 1024) -> None:
        if max_sessions < 1:
            raise ValueError("max_sessions must be >= 1")
        self._lock = threading.RLock()
        self._games: "OrderedDict[str, Game]" = OrderedDict()
        self.max_sessions = max_sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def create(self, game: Optional[Game] = None) -> str:
        """Store ``game`` (or a fresh one) and return its new ``game_id``."""
        gid = str(uuid.uuid4())
        with self._lock:
            self._games[gid] = game if game is not None else Game.new()
            while len(self._games) > self.max_sessions:
                evicted, _ = self._games.popitem(last=False)
                logger.info("evicted session %s", evicted)
        return gid

    def get(self, game_id: str) -> Optional[Game]:
        with self._lock:
            return self._games.get(game_id)

    def set(self, game_id: str, game: Game) -> None:
        with self._lock:
            if game_id not in self._games:
                raise KeyError(game_id)
            self._games[game_id] = game

    def delete(self, game_id: str) -> None:
        with self._lock:
            self._games.pop(game_id, None)
