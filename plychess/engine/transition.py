from __future__ import annotations

from typing import List, Optional, Union

from .move import Move, parse_uci
from .position import RECENT_MOVES_WINDOW, Cell, Color, Piece, PieceKind, Position


PROMOTION_KINDS = {
    "q": PieceKind.QUEEN,
    "r": PieceKind.ROOK,
    "b": PieceKind.BISHOP,
    "n": PieceKind.KNIGHT,
}

# right -> (king start square, rook start square, rook color)
CASTLING_ANCHORS = {
    "K": (4, 7, Color.WHITE),
    "Q": (4, 0, Color.WHITE),
    "k": (60, 63, Color.BLACK),
    "q": (60, 56, Color.BLACK),
}

# king destination -> (rook origin, rook destination) for a castling king hop
CASTLING_ROOK_HOPS = {
    6: (7, 5),
    2: (0, 3),
    62: (63, 61),
    58: (56, 59),
}


def apply_move(position: Position, move: Union[Move, str]) -> Position:
    """Return the successor of ``position`` after ``move``.

    The input position is never modified. Every field of the successor is
    derived from the prior position: board, side to move, castling rights,
    en passant target, both clocks and the recent-move window.

    Args:
        position (Position): Position before the move.
        move (Union[Move, str]): Move object or long algebraic text.

    Returns:
        Position: The new position.

    Raises:
        ValueError: If the move text is malformed or the origin square is
            empty. Legality is not checked here.
    """
    if isinstance(move, str):
        move = parse_uci(move)
    from_sq, to_sq = move.from_sq, move.to_sq
    prior = position.board
    mover = prior[from_sq]
    if mover is None:
        raise ValueError("no piece to move from from_sq")
    target = prior[to_sq]

    board: List[Cell] = list(prior)
    board[from_sq] = None

    is_pawn = mover.kind is PieceKind.PAWN
    last_rank = 7 if mover.color is Color.WHITE else 0
    if is_pawn and to_sq // 8 == last_rank:
        kind = PROMOTION_KINDS[move.promotion or "q"]
        board[to_sq] = Piece(kind, mover.color)
    else:
        board[to_sq] = mover

    # En passant: diagonal pawn step onto the empty target square
    if (
        is_pawn
        and target is None
        and to_sq == position.ep_square
        and (to_sq - from_sq) % 8 != 0
    ):
        victim_sq = to_sq - 8 if mover.color is Color.WHITE else to_sq + 8
        board[victim_sq] = None

    # Castling: king jumps two files, rook hops over it
    if mover.kind is PieceKind.KING and abs(to_sq - from_sq) == 2 and to_sq in CASTLING_ROOK_HOPS:
        rook_from, rook_to = CASTLING_ROOK_HOPS[to_sq]
        board[rook_to] = board[rook_from]
        board[rook_from] = None

    side_to_move = mover.color.opponent

    castling = "".join(
        right for right in position.castling if _right_survives(right, from_sq, board)
    )

    ep_square: Optional[int] = None
    if is_pawn and abs(to_sq - from_sq) == 16:
        ep_square = (from_sq + to_sq) // 2

    is_capture = target is not None and target.color is not mover.color
    halfmove_clock = 0 if (is_capture or is_pawn) else position.halfmove_clock + 1

    fullmove_number = position.fullmove_number
    if side_to_move is Color.WHITE:
        fullmove_number += 1

    recent = position.recent_moves + (move.to_uci(),)
    if len(recent) > RECENT_MOVES_WINDOW:
        recent = recent[-RECENT_MOVES_WINDOW:]

    return Position(
        board=tuple(board),
        side_to_move=side_to_move,
        castling=castling,
        ep_square=ep_square,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
        recent_moves=recent,
    )


def _right_survives(right: str, from_sq: int, board: List[Cell]) -> bool:
    king_start, rook_start, color = CASTLING_ANCHORS[right]
    if from_sq == king_start or from_sq == rook_start:
        return False
    rook = board[rook_start]
    return rook is not None and rook.kind is PieceKind.ROOK and rook.color is color
