"""Game-end detection, recomputed on demand from a position.

The repetition rule here is a fixed-window heuristic, not three-fold
repetition: it fires only when the last eight half-moves are an exact
four-half-move cycle played twice and the halfmove clock is at least 16.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .attacks import in_check
from .legal import generate_legal_moves
from .move import Move
from .position import RECENT_MOVES_WINDOW, Color, PieceKind, Position


REPETITION_MIN_HALFMOVES = 16

DRAW_REPETITION = "repetition"
DRAW_NO_MOVES = "no_moves"
DRAW_INSUFFICIENT_MATERIAL = "insufficient_material"


def is_checkmate(position: Position, color: Color) -> bool:
    if not in_check(position, color):
        return False
    return not generate_legal_moves(position, color)


def is_stalemate(position: Position) -> bool:
    stm = position.side_to_move
    if generate_legal_moves(position, stm):
        return False
    return not in_check(position, stm)


def has_insufficient_material(position: Position) -> bool:
    """Return True unless some side could still force mate.

    Material is sufficient as soon as the scan finds a queen, rook or pawn,
    two knights of one color, a knight and a bishop of one color, or bishops
    of one color on both light and dark squares.
    """
    knights = {Color.WHITE: 0, Color.BLACK: 0}
    light_bishops = {Color.WHITE: 0, Color.BLACK: 0}
    dark_bishops = {Color.WHITE: 0, Color.BLACK: 0}
    for sq, piece in position.pieces():
        kind, color = piece.kind, piece.color
        if kind in (PieceKind.QUEEN, PieceKind.ROOK, PieceKind.PAWN):
            return False
        if kind is PieceKind.KNIGHT:
            knights[color] += 1
        elif kind is PieceKind.BISHOP:
            # a1 is dark: dark squares have an even file+rank sum
            if (sq % 8 + sq // 8) % 2 == 0:
                dark_bishops[color] += 1
            else:
                light_bishops[color] += 1
        else:
            continue
        bishops = light_bishops[color] + dark_bishops[color]
        if knights[color] >= 2:
            return False
        if knights[color] and bishops:
            return False
        if light_bishops[color] and dark_bishops[color]:
            return False
    return True


def is_repetition_draw(position: Position) -> bool:
    if position.halfmove_clock < REPETITION_MIN_HALFMOVES:
        return False
    recent = position.recent_moves
    if len(recent) != RECENT_MOVES_WINDOW:
        return False
    half = RECENT_MOVES_WINDOW // 2
    return all(recent[i] == recent[i + half] for i in range(half))


def draw_reason(position: Position) -> Optional[str]:
    """Name the first draw rule that applies, or None."""
    if is_repetition_draw(position):
        return DRAW_REPETITION
    if is_stalemate(position):
        return DRAW_NO_MOVES
    if has_insufficient_material(position):
        return DRAW_INSUFFICIENT_MATERIAL
    return None


def is_draw(position: Position) -> bool:
    return draw_reason(position) is not None


def is_game_over(position: Position) -> bool:
    return (
        is_draw(position)
        or is_checkmate(position, Color.WHITE)
        or is_checkmate(position, Color.BLACK)
    )


@dataclass
class Assessment:
    """One-pass terminal classification used by the search.

    ``legal_moves`` are the side to move's legal moves, generated once and
    reused for the terminal tests.
    """

    legal_moves: List[Move] = field(default_factory=list)
    checkmated: Optional[Color] = None
    draw: Optional[str] = None

    @property
    def terminal(self) -> bool:
        return self.draw is not None or self.checkmated is not None


def assess(position: Position) -> Assessment:
    """Classify ``position`` with the same precedence as the helpers above."""
    stm = position.side_to_move
    legal = generate_legal_moves(position, stm)
    checkmated: Optional[Color] = None
    if not legal and in_check(position, stm):
        checkmated = stm
    elif is_checkmate(position, stm.opponent):
        checkmated = stm.opponent

    draw: Optional[str] = None
    if is_repetition_draw(position):
        draw = DRAW_REPETITION
    elif not legal and checkmated is not stm:
        draw = DRAW_NO_MOVES
    elif has_insufficient_material(position):
        draw = DRAW_INSUFFICIENT_MATERIAL
    return Assessment(legal_moves=legal, checkmated=checkmated, draw=draw)
