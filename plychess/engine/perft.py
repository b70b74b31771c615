from __future__ import annotations

from typing import Dict

from .legal import generate_legal_moves
from .position import Position
from .transition import apply_move


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes of the legal move tree below ``position``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Children are built by copy-apply, the same path the search uses.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = generate_legal_moves(position)
    if depth == 1:
        return len(moves)
    return sum(perft(apply_move(position, m), depth - 1) for m in moves)


def divide(position: Position, depth: int) -> Dict[str, int]:
    """Per-root-move perft counts keyed by UCI move, for locating generator bugs."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    return {
        m.to_uci(): perft(apply_move(position, m), depth - 1)
        for m in generate_legal_moves(position)
    }
