"""Per-piece pseudo-legal move generation.

Generators know board edges and occupancy but not king safety; that is layered
on by ``legal.generate_legal_moves``. With ``attacks_only`` set they emit only
the squares a piece attacks (no pawn pushes, en passant or castling), which is
what the attack oracle consumes.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Tuple

from .move import PROMOTION_PIECES, Move, square_to_str
from .position import Color, PieceKind, Position


logger = logging.getLogger(__name__)


KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 2),
    (1, 2),
    (-2, 1),
    (2, 1),
    (-2, -1),
    (2, -1),
    (-1, -2),
    (1, -2),
)
DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))
ORTHOGONALS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
KING_OFFSETS = DIAGONALS + ORTHOGONALS

# right -> (king start, king destination, squares that must be empty, squares that must be safe)
CASTLING_PATHS: Dict[str, Tuple[int, int, Tuple[int, ...], Tuple[int, ...]]] = {
    "K": (4, 6, (5, 6), (4, 5, 6)),
    "Q": (4, 2, (1, 2, 3), (4, 3, 2)),
    "k": (60, 62, (61, 62), (60, 61, 62)),
    "q": (60, 58, (57, 58, 59), (60, 59, 58)),
}
# right -> rook start square
CASTLING_ROOKS: Dict[str, int] = {"K": 7, "Q": 0, "k": 63, "q": 56}


def _add_pawn_move(moves: List[Move], from_sq: int, to_sq: int, last_rank: int) -> None:
    if to_sq // 8 == last_rank:
        for promo in PROMOTION_PIECES:
            moves.append(Move(from_sq, to_sq, promotion=promo))
    else:
        moves.append(Move(from_sq, to_sq))


def pawn_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    """Pawn pushes, captures, en passant and promotions from ``sq``.

    In attack mode only captures onto enemy pieces remain. Pushes, en passant
    and empty diagonals are not reported.
    """
    board = position.board
    color = board[sq].color  # type: ignore[union-attr]
    step = 8 if color is Color.WHITE else -8
    start_rank = 1 if color is Color.WHITE else 6
    last_rank = 7 if color is Color.WHITE else 0
    file_idx = sq % 8
    rank_idx = sq // 8
    moves: List[Move] = []

    if not attacks_only:
        one = sq + step
        if 0 <= one < 64 and board[one] is None:
            _add_pawn_move(moves, sq, one, last_rank)
            two = one + step
            if rank_idx == start_rank and board[two] is None:
                moves.append(Move(sq, two))

    for df in (-1, 1):
        tf = file_idx + df
        tr = rank_idx + (1 if color is Color.WHITE else -1)
        if not (0 <= tf < 8 and 0 <= tr < 8):
            continue
        target = tr * 8 + tf
        occupant = board[target]
        if occupant is not None and occupant.color is not color:
            _add_pawn_move(moves, sq, target, last_rank)
        elif (
            not attacks_only
            and target == position.ep_square
            and color is position.side_to_move
        ):
            _add_pawn_move(moves, sq, target, last_rank)
    return moves


def knight_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    board = position.board
    color = board[sq].color  # type: ignore[union-attr]
    f, r = sq % 8, sq // 8
    moves: List[Move] = []
    for df, dr in KNIGHT_OFFSETS:
        tf = f + df
        tr = r + dr
        if 0 <= tf < 8 and 0 <= tr < 8:
            to_sq = tr * 8 + tf
            occupant = board[to_sq]
            if occupant is None or occupant.color is not color:
                moves.append(Move(sq, to_sq))
    return moves


def _slide(position: Position, sq: int, directions: Sequence[Tuple[int, int]]) -> List[Move]:
    board = position.board
    color = board[sq].color  # type: ignore[union-attr]
    f, r = sq % 8, sq // 8
    moves: List[Move] = []
    for df, dr in directions:
        tf, tr = f, r
        while True:
            tf += df
            tr += dr
            if not (0 <= tf < 8 and 0 <= tr < 8):
                break
            to_sq = tr * 8 + tf
            occupant = board[to_sq]
            if occupant is not None and occupant.color is color:
                break
            moves.append(Move(sq, to_sq))
            if occupant is not None:
                break
    return moves


def bishop_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    return _slide(position, sq, DIAGONALS)


def rook_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    return _slide(position, sq, ORTHOGONALS)


def queen_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    return _slide(position, sq, DIAGONALS + ORTHOGONALS)


def king_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    """Adjacent king steps plus, outside attack mode, castling.

    A castle is offered for each remaining right whose path is empty and whose
    king start, transit and destination squares are not attacked.
    """
    board = position.board
    color = board[sq].color  # type: ignore[union-attr]
    f, r = sq % 8, sq // 8
    moves: List[Move] = []
    for df, dr in KING_OFFSETS:
        tf = f + df
        tr = r + dr
        if 0 <= tf < 8 and 0 <= tr < 8:
            to_sq = tr * 8 + tf
            occupant = board[to_sq]
            if occupant is None or occupant.color is not color:
                moves.append(Move(sq, to_sq))

    if attacks_only or not position.castling:
        return moves

    from .attacks import is_attacked

    rights = "KQ" if color is Color.WHITE else "kq"
    for right in rights:
        if right not in position.castling:
            continue
        king_from, king_to, empty, safe = CASTLING_PATHS[right]
        if sq != king_from:
            continue
        rook = board[CASTLING_ROOKS[right]]
        if rook is None or rook.kind is not PieceKind.ROOK or rook.color is not color:
            continue
        if any(board[s] is not None for s in empty):
            continue
        if any(is_attacked(position, s, color) for s in safe):
            continue
        moves.append(Move(king_from, king_to))
    return moves


Generator = Callable[[Position, int, bool], List[Move]]

GENERATORS: Dict[PieceKind, Generator] = {
    PieceKind.PAWN: pawn_moves,
    PieceKind.KNIGHT: knight_moves,
    PieceKind.BISHOP: bishop_moves,
    PieceKind.ROOK: rook_moves,
    PieceKind.QUEEN: queen_moves,
    PieceKind.KING: king_moves,
}


def piece_moves(position: Position, sq: int, attacks_only: bool = False) -> List[Move]:
    """Dispatch to the generator for whatever piece stands on ``sq``.

    An empty square is reported and yields no moves.
    """
    piece = position.board[sq]
    if piece is None:
        logger.warning("no piece on square %s", square_to_str(sq))
        return []
    return GENERATORS[piece.kind](position, sq, attacks_only)


def pseudo_legal_moves(position: Position, color: Color) -> List[Move]:
    """All moves of ``color``'s pieces before king-safety filtering."""
    moves: List[Move] = []
    for sq, _piece in position.pieces(color):
        moves.extend(piece_moves(position, sq))
    return moves
