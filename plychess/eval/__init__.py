"""Static evaluation and terminal utility.

Pure, deterministic, and side-effect free. Scores are from white's point of
view in whole pawns.
"""

from __future__ import annotations

import math
from typing import Dict, Final, Optional, Union

from plychess.engine.position import Color, PieceKind, Position
from plychess.engine.terminal import Assessment, assess


Score = Union[int, float]

# Material values in pawns
MATERIAL_VALUES: Final[Dict[PieceKind, int]] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 0,
}

# Utility of a mated side; nothing else compares beyond these
WIN: Final = math.inf
LOSS: Final = -math.inf
DRAW: Final = 0


def evaluate(position: Position) -> int:
    """Net material, white minus black."""
    score = 0
    for _sq, piece in position.pieces():
        value = MATERIAL_VALUES[piece.kind]
        score += value if piece.color is Color.WHITE else -value
    return score


def utility(position: Position, assessment: Optional[Assessment] = None) -> Optional[Score]:
    """Score a terminal position.

    Returns 0 for a draw, ``LOSS`` when white is mated and ``WIN`` when black
    is mated. For a position that is not over the result is ``None``; callers
    must only ask about confirmed terminal positions.
    """
    if assessment is None:
        assessment = assess(position)
    if assessment.draw is not None:
        return DRAW
    if assessment.checkmated is Color.WHITE:
        return LOSS
    if assessment.checkmated is Color.BLACK:
        return WIN
    return None
