from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from .move import square_to_str, str_to_square


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

# Number of half-moves kept for the repetition heuristic
RECENT_MOVES_WINDOW = 8


class Color(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE


class PieceKind(str, Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


@dataclass(frozen=True)
class Piece:
    """A (kind, color) pair occupying a square."""

    kind: PieceKind
    color: Color

    @property
    def symbol(self) -> str:
        """FEN letter: uppercase for white, lowercase for black."""
        ch = self.kind.value
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_symbol(cls, ch: str) -> "Piece":
        try:
            kind = PieceKind(ch.lower())
        except ValueError as e:
            raise ValueError(f"invalid piece letter: {ch!r}") from e
        return cls(kind, Color.WHITE if ch.isupper() else Color.BLACK)


Cell = Optional[Piece]


@dataclass(frozen=True)
class Position:
    """Immutable chess position.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - Successor positions are produced by ``transition.apply_move``; nothing
      mutates a Position after construction, so search can branch freely from
      any ancestor.
    """

    board: Tuple[Cell, ...]
    side_to_move: Color
    castling: str  # ordered subset of 'KQkq' or ''
    ep_square: Optional[int]
    halfmove_clock: int
    fullmove_number: int
    # last half-moves in UCI form, oldest first
    recent_moves: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.board) != 64:
            raise ValueError("board must have exactly 64 squares")

    @classmethod
    def startpos(cls) -> "Position":
        return cls.from_fen(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "Position":
        """Create a position from a Forsyth–Edwards Notation (FEN) string.

        Args:
            fen (str): FEN string describing the position to load.

        Returns:
            Position: Position encoded in ``fen`` with an empty move history.

        Raises:
            ValueError: If ``fen`` is empty, has the wrong number of fields, or
                contains invalid piece placement, castling rights, en passant
                square, or move counters.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) != 6:
            raise ValueError("FEN must have 6 fields")
        placement, stm, castling, ep, halfmove, fullmove = parts

        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        board: List[Cell] = [None] * 64
        for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
            file_idx = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file_idx += n
                else:
                    if file_idx >= 8:
                        raise ValueError("too many squares in FEN rank")
                    board[rank_idx * 8 + file_idx] = Piece.from_symbol(ch)
                    file_idx += 1
            if file_idx != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")

        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")

        if castling != "-":
            for ch in castling:
                if ch not in "KQkq":
                    raise ValueError("invalid castling rights")
            castling = "".join(c for c in "KQkq" if c in castling)
        else:
            castling = ""

        ep_square: Optional[int]
        if ep == "-":
            ep_square = None
        else:
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            if ep_square // 8 not in (2, 5):
                raise ValueError("invalid en passant square rank")

        try:
            halfmove_clock = int(halfmove)
            fullmove_number = int(fullmove)
        except ValueError as e:
            raise ValueError("invalid move counters in FEN") from e
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters in FEN")

        return cls(
            board=tuple(board),
            side_to_move=Color(stm),
            castling=castling,
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )

    def to_fen(self) -> str:
        """Serialize the position into a normalized FEN string."""
        ranks_str: List[str] = []
        for rank_idx in range(7, -1, -1):
            run = 0
            row = []
            for file_idx in range(8):
                piece = self.board[rank_idx * 8 + file_idx]
                if piece is None:
                    run += 1
                    continue
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(piece.symbol)
            if run > 0:
                row.append(str(run))
            ranks_str.append("".join(row))
        placement = "/".join(ranks_str)

        castling = self.castling or "-"
        ep = square_to_str(self.ep_square) if self.ep_square is not None else "-"
        return (
            f"{placement} {self.side_to_move.value} {castling} {ep} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )

    def piece_at(self, sq: int) -> Cell:
        return self.board[sq]

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[int, Piece]]:
        """Yield ``(square, piece)`` for occupied squares, optionally of one color."""
        for sq, piece in enumerate(self.board):
            if piece is not None and (color is None or piece.color is color):
                yield sq, piece
