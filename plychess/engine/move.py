from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


PROMOTION_PIECES = ("q", "r", "b", "n")


@dataclass(frozen=True)
class Move:
    """A half-move as exchanged between generators, the legality filter and
    the state transition.

    Attributes:
        from_sq (int): Origin square index (a1=0 .. h8=63).
        to_sq (int): Destination square index.
        promotion (Optional[str]): Lowercase promotion piece letter, if any.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[str] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + (self.promotion or "")

    def __str__(self) -> str:
        return self.to_uci()


def parse_uci(uci: str) -> Move:
    """Parse a move in long algebraic notation.

    Args:
        uci (str): Four characters (origin, destination) optionally followed by
            a promotion letter, e.g. ``"g7g8n"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the text is too short or too long, names an invalid
            square, or carries an unknown promotion piece.
    """
    if len(uci) < 4:
        raise ValueError(f"move too short to hold origin and destination: {uci!r}")
    if len(uci) > 5:
        raise ValueError(f"invalid move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[str] = None
    if len(uci) == 5:
        promo = uci[4].lower()
        if promo not in PROMOTION_PIECES:
            raise ValueError(f"invalid promotion piece: {promo!r}")
    return Move(from_sq, to_sq, promo)


def str_to_square(s: str) -> int:
    """Convert algebraic notation (``"e4"``) into a square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside 0..63.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    return chr(ord("a") + idx % 8) + str(idx // 8 + 1)
