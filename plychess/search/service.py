from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Union
import logging
import random
import time

from plychess import config
from plychess.engine.game import Game
from plychess.engine.legal import generate_legal_moves
from plychess.engine.move import Move
from plychess.engine.position import Color, Position
from plychess.engine.terminal import assess, is_checkmate
from plychess.engine.transition import apply_move
from plychess.eval import LOSS, WIN, Score, evaluate, utility


logger = logging.getLogger(__name__)


@dataclass
class SearchLimits:
    """Bounds for one iterative-deepening run.

    ``movetime_ms`` and ``node_budget`` are checked at every minimax node.
    Running out abandons the depth in progress and the result of
    the last completed depth is returned. Depth 0 always completes.
    """

    max_depth: int = config.MAX_DEPTH
    movetime_ms: Optional[int] = None
    node_budget: Optional[int] = None


@dataclass
class DepthChoice:
    best_move: Optional[Move]
    score: Score
    ties: List[Move] = field(default_factory=list)
    delivers_mate: bool = False
    complete: bool = True


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: Optional[Score]
    depth: int
    nodes: int
    time_ms: int
    ties: List[Move]
    iters: List[Dict[str, Any]]
    stopped: bool = False

    @property
    def mate_for(self) -> Optional[Color]:
        """Color whose win the score reports, if it is a mate score."""
        if self.score == WIN:
            return Color.WHITE
        if self.score == LOSS:
            return Color.BLACK
        return None


class SearchService:
    """Depth-limited minimax over material with iterative deepening.

    White maximizes and black minimizes. There is no pruning: every legal
    line is expanded to the depth limit, which bounds practical depth to a
    few plies.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random(config.SEED)
        self.nodes = 0
        self._should_stop: Optional[Callable[[], bool]] = None
        self._out_of_budget = False

    def _budget_spent(self) -> bool:
        if self._out_of_budget:
            return True
        if self._should_stop is not None and self._should_stop():
            self._out_of_budget = True
        return self._out_of_budget

    def max_value(self, position: Position, depth: int) -> Score:
        self.nodes += 1
        # Out of budget: the value is discarded along with this depth
        if self._budget_spent():
            return evaluate(position)
        verdict = assess(position)
        if verdict.terminal:
            return utility(position, verdict)  # type: ignore[return-value]
        if depth == 0:
            return evaluate(position)
        if position.side_to_move is Color.WHITE:
            moves = verdict.legal_moves
        else:
            moves = generate_legal_moves(position, Color.WHITE)
        best: Score = LOSS
        for mv in moves:
            score = self.min_value(apply_move(position, mv), depth - 1)
            if score > best:
                best = score
        return best

    def min_value(self, position: Position, depth: int) -> Score:
        self.nodes += 1
        if self._budget_spent():
            return evaluate(position)
        verdict = assess(position)
        if verdict.terminal:
            return utility(position, verdict)  # type: ignore[return-value]
        if depth == 0:
            return evaluate(position)
        if position.side_to_move is Color.BLACK:
            moves = verdict.legal_moves
        else:
            moves = generate_legal_moves(position, Color.BLACK)
        best: Score = WIN
        for mv in moves:
            score = self.max_value(apply_move(position, mv), depth - 1)
            if score < best:
                best = score
        return best

    def choose_move(
        self,
        position: Position,
        depth: int,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Optional[DepthChoice]:
        """Pick the side to move's best move when looking ``depth`` plies past it.

        Returns None when there is no legal move. A move that mates the
        opponent outright is taken regardless of score comparison. Moves tied
        with the best score are chosen between with ``self.rng``. When every
        move scores as badly as possible the first generated move is returned.

        ``should_stop`` is polled at every node; once it fires the returned
        choice is marked incomplete.
        """
        legal = generate_legal_moves(position)
        if not legal:
            return None
        white = position.side_to_move is Color.WHITE
        opponent = position.side_to_move.opponent
        self._should_stop = should_stop
        self._out_of_budget = False

        best_score: Score = LOSS if white else WIN
        best_move: Optional[Move] = None
        ties: List[Move] = []
        delivers_mate = False

        for mv in legal:
            if self._budget_spent():
                return DepthChoice(best_move, best_score, ties, delivers_mate, complete=False)
            child = apply_move(position, mv)
            if white:
                score = self.min_value(child, depth)
                improves = score > best_score
            else:
                score = self.max_value(child, depth)
                improves = score < best_score
            if self._out_of_budget:
                return DepthChoice(best_move, best_score, ties, delivers_mate, complete=False)
            mates = is_checkmate(child, opponent)
            if mates:
                if delivers_mate:
                    ties.append(mv)
                else:
                    best_score, best_move, ties = score, mv, [mv]
                    delivers_mate = True
            elif delivers_mate:
                continue
            elif improves:
                best_score, best_move, ties = score, mv, [mv]
            elif best_move is not None and score == best_score:
                ties.append(mv)

        if best_move is None:
            logger.info("mate forced, picked move %s", legal[0].to_uci())
            return DepthChoice(legal[0], best_score, [legal[0]])
        if len(ties) > 1:
            logger.info(
                "no best move out of ties: %s", ", ".join(m.to_uci() for m in ties)
            )
            best_move = self.rng.choice(ties)
        else:
            logger.debug(
                "best move for %s is %s", position.side_to_move.value, best_move.to_uci()
            )
        return DepthChoice(best_move, best_score, ties, delivers_mate)

    def search(
        self,
        game: Union[Game, Position],
        depth: Optional[int] = None,
        movetime_ms: Optional[int] = None,
        node_budget: Optional[int] = None,
        *,
        limits: Optional[SearchLimits] = None,
    ) -> SearchResult:
        """Iterative deepening over depth limits 0..max_depth inclusive.

        Args:
            game: Game or bare position to search from.
            depth: Deepest limit; defaults to ``config.MAX_DEPTH``.
            movetime_ms: Optional wall-clock budget in milliseconds.
            node_budget: Optional cap on minimax nodes visited.
            limits: Alternative to the three keyword limits.

        Returns:
            SearchResult: The move of the last completed depth. With no legal
                move at the root ``best_move`` is None and ``score`` is the
                root's utility.
        """
        position = game.position if isinstance(game, Game) else game
        if limits is None:
            limits = SearchLimits(
                max_depth=config.MAX_DEPTH if depth is None else depth,
                movetime_ms=movetime_ms,
                node_budget=node_budget,
            )
        if limits.max_depth < 0:
            raise ValueError("depth must be >= 0")

        self.nodes = 0
        start = time.perf_counter()
        iters: List[Dict[str, Any]] = []

        def out_of_budget() -> bool:
            if limits.node_budget is not None and self.nodes >= limits.node_budget:
                return True
            if limits.movetime_ms is not None:
                elapsed_ms = (time.perf_counter() - start) * 1000
                if elapsed_ms >= limits.movetime_ms:
                    return True
            return False

        last: Optional[DepthChoice] = None
        completed_depth = 0
        stopped = False
        for d in range(0, limits.max_depth + 1):
            logger.debug("depth %d", d)
            iter_start = time.perf_counter()
            prev_nodes = self.nodes
            choice = self.choose_move(position, d, None if d == 0 else out_of_budget)
            if choice is None:
                break
            if not choice.complete:
                stopped = True
                logger.info("search budget exhausted at depth %d; keeping depth %d", d, completed_depth)
                break
            last, completed_depth = choice, d
            iters.append(
                {
                    "depth": d,
                    "time_ms": int((time.perf_counter() - iter_start) * 1000),
                    "nodes": self.nodes - prev_nodes,
                    "best_move": choice.best_move.to_uci() if choice.best_move else None,
                }
            )

        if last is None:
            score = utility(position)
            return SearchResult(
                best_move=None,
                score=score,
                depth=0,
                nodes=self.nodes,
                time_ms=int((time.perf_counter() - start) * 1000),
                ties=[],
                iters=iters,
                stopped=stopped,
            )
        return SearchResult(
            best_move=last.best_move,
            score=last.score,
            depth=completed_depth,
            nodes=self.nodes,
            time_ms=int((time.perf_counter() - start) * 1000),
            ties=list(last.ties),
            iters=iters,
            stopped=stopped,
        )


def iterative_deepening(
    position: Position,
    max_depth: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Convenience wrapper returning only the chosen move."""
    return SearchService(rng).search(position, depth=max_depth).best_move
