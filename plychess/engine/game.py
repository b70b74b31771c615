from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional

from . import terminal
from .attacks import in_check
from .legal import generate_legal_moves
from .move import Move
from .position import Color, PieceKind, Position
from .transition import apply_move


@dataclass
class Game:
    """Game wrapper around an immutable position history.

    Responsibility: track positions, expose legal moves, apply and undo moves.
    """

    positions: List[Position]
    move_stack: List[Move] = field(default_factory=list)

    @classmethod
    def new(cls) -> "Game":
        return cls(positions=[Position.startpos()])

    @classmethod
    def from_fen(cls, fen: str) -> "Game":
        return cls(positions=[Position.from_fen(fen)])

    @property
    def position(self) -> Position:
        return self.positions[-1]

    def to_fen(self) -> str:
        return self.position.to_fen()

    def legal_moves(self) -> List[Move]:
        return generate_legal_moves(self.position)

    def apply_move(self, move: Move) -> None:
        """Play ``move`` if it is legal.

        A pawn push to the last rank without a promotion letter promotes to a
        queen, matching ``transition.apply_move``.
        """
        move = self._with_default_promotion(move)
        if move not in self.legal_moves():
            raise ValueError("illegal move")
        self.positions.append(apply_move(self.position, move))
        self.move_stack.append(move)

    def _with_default_promotion(self, move: Move) -> Move:
        if move.promotion is not None:
            return move
        piece = self.position.piece_at(move.from_sq)
        if piece is None or piece.kind is not PieceKind.PAWN:
            return move
        last_rank = 7 if piece.color is Color.WHITE else 0
        if move.to_sq // 8 != last_rank:
            return move
        return replace(move, promotion="q")

    def undo_move(self) -> None:
        if not self.move_stack:
            raise ValueError("no moves to undo")
        self.move_stack.pop()
        self.positions.pop()

    # --- State flags for protocol ---
    def in_check(self) -> bool:
        return in_check(self.position)

    def checkmate(self) -> bool:
        return terminal.is_checkmate(self.position, self.position.side_to_move)

    def stalemate(self) -> bool:
        return terminal.is_stalemate(self.position)

    def is_draw(self) -> bool:
        return terminal.is_draw(self.position)

    def draw_reason(self) -> Optional[str]:
        return terminal.draw_reason(self.position)

    def is_game_over(self) -> bool:
        return terminal.is_game_over(self.position)

    def move_history_uci(self) -> List[str]:
        return [m.to_uci() for m in self.move_stack]
