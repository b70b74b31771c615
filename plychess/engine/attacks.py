from __future__ import annotations

from typing import Optional

from .movegen import piece_moves
from .position import Color, PieceKind, Position


def is_attacked(position: Position, sq: int, defender: Color) -> bool:
    """Return True if any piece of ``defender``'s opponent attacks ``sq``.

    Every enemy piece's attack-only move set is generated and searched for
    ``sq``; quiet pawn pushes, en passant and castling never count.
    """
    attacker = defender.opponent
    for origin, _piece in position.pieces(attacker):
        for mv in piece_moves(position, origin, attacks_only=True):
            if mv.to_sq == sq:
                return True
    return False


def king_square(position: Position, color: Color) -> Optional[int]:
    for sq, piece in position.pieces(color):
        if piece.kind is PieceKind.KING:
            return sq
    return None


def in_check(position: Position, color: Optional[Color] = None) -> bool:
    """Whether ``color`` (default: side to move) has its king attacked."""
    if color is None:
        color = position.side_to_move
    ks = king_square(position, color)
    if ks is None:
        return False
    return is_attacked(position, ks, color)
