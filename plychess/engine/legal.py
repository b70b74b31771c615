from __future__ import annotations

from typing import List, Optional

from .attacks import is_attacked, king_square
from .move import Move
from .movegen import pseudo_legal_moves
from .position import Color, Position
from .transition import apply_move


def generate_legal_moves(position: Position, color: Optional[Color] = None) -> List[Move]:
    """Return the fully legal moves of ``color`` (default: side to move).

    Each pseudo-legal candidate is simulated and kept only if the mover's king
    is not attacked in the resulting position. There is no pin shortcut.
    """
    if color is None:
        color = position.side_to_move
    legal: List[Move] = []
    for mv in pseudo_legal_moves(position, color):
        successor = apply_move(position, mv)
        ks = king_square(successor, color)
        if ks is None:
            continue
        if not is_attacked(successor, ks, color):
            legal.append(mv)
    return legal
