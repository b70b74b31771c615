from __future__ import annotations

import random

import pytest

from plychess import config
from plychess.engine.game import Game
from plychess.engine.legal import generate_legal_moves
from plychess.engine.position import Color, Position
from plychess.eval import DRAW, LOSS, WIN
from plychess.search.service import SearchService, iterative_deepening


WHITE_MATE_IN_ONE = "6k1/5ppp/8/3q4/8/2N5/5PPP/4R1K1 w - - 0 1"
BLACK_MATE_IN_ONE = "4r1k1/5ppp/8/8/8/8/5PPP/6K1 b - - 0 1"
FORCED_MATE = "k7/8/1K6/8/8/8/8/7R b - - 0 1"


def test_white_finds_mate_in_one_over_material() -> None:
    # Nxd5 wins a queen, Re8 ends the game
    res = SearchService(random.Random(0)).search(Position.from_fen(WHITE_MATE_IN_ONE), depth=1)
    assert res.best_move is not None
    assert res.best_move.to_uci() == "e1e8"
    assert res.score == WIN
    assert res.mate_for is Color.WHITE
    assert res.depth == 1


def test_black_finds_mate_in_one() -> None:
    res = SearchService(random.Random(0)).search(Position.from_fen(BLACK_MATE_IN_ONE), depth=1)
    assert res.best_move is not None
    assert res.best_move.to_uci() == "e8e1"
    assert res.score == LOSS
    assert res.mate_for is Color.BLACK


class _FlatScores(SearchService):
    """Scores every reply the same so only the mate check can pick a move."""

    def min_value(self, position: Position, depth: int):
        self.nodes += 1
        return 1000


def test_mating_move_wins_regardless_of_scores() -> None:
    svc = _FlatScores(random.Random(3))
    choice = svc.choose_move(Position.from_fen(WHITE_MATE_IN_ONE), 0)
    assert choice is not None
    assert choice.delivers_mate
    assert choice.best_move is not None
    assert choice.best_move.to_uci() == "e1e8"
    assert [m.to_uci() for m in choice.ties] == ["e1e8"]


def test_forced_mate_falls_back_to_first_move() -> None:
    # Kb8 is the only move and Rh8 mates after it
    p = Position.from_fen(FORCED_MATE)
    res = SearchService(random.Random(0)).search(p, depth=1)
    assert res.best_move == generate_legal_moves(p)[0]
    assert res.best_move is not None and res.best_move.to_uci() == "a8b8"
    assert res.score == WIN
    assert res.depth == 1


def test_seeded_tie_break_is_reproducible() -> None:
    p = Position.startpos()
    res = SearchService(random.Random(42)).search(p, depth=0)
    assert len(res.ties) == 20
    assert res.score == 0
    assert res.best_move == random.Random(42).choice(generate_legal_moves(p))


def test_default_depth_comes_from_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(config, "MAX_DEPTH", 0)
    res = SearchService(random.Random(0)).search(Position.startpos())
    assert res.depth == 0
    assert len(res.iters) == 1


def test_iterations_cover_every_depth() -> None:
    res = SearchService(random.Random(0)).search(Game.new(), depth=1)
    assert [it["depth"] for it in res.iters] == [0, 1]
    assert res.depth == 1
    assert not res.stopped
    assert res.nodes == sum(it["nodes"] for it in res.iters)


def test_node_budget_keeps_last_completed_depth() -> None:
    res = SearchService(random.Random(0)).search(Position.startpos(), depth=2, node_budget=1)
    assert res.stopped
    assert res.depth == 0
    assert res.best_move is not None
    assert [it["depth"] for it in res.iters] == [0]


def test_root_without_moves_reports_utility() -> None:
    svc = SearchService(random.Random(0))
    stale = svc.search(Position.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"), depth=1)
    assert stale.best_move is None
    assert stale.score == DRAW
    mated = svc.search(Position.from_fen("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1"), depth=1)
    assert mated.best_move is None
    assert mated.score == WIN


def test_minimax_values_at_mate() -> None:
    svc = SearchService(random.Random(0))
    mated_black = Position.from_fen("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1")
    assert svc.min_value(mated_black, 3) == WIN
    assert svc.max_value(mated_black, 3) == WIN
    assert svc.max_value(Position.startpos(), 0) == 0


def test_negative_depth_rejected() -> None:
    with pytest.raises(ValueError):
        SearchService().search(Position.startpos(), depth=-1)


def test_iterative_deepening_wrapper() -> None:
    mv = iterative_deepening(Position.from_fen(WHITE_MATE_IN_ONE), max_depth=1, rng=random.Random(1))
    assert mv is not None and mv.to_uci() == "e1e8"


def test_node_budget_interrupts_a_single_root_move() -> None:
    # Depth 0 and 1 from the start take 20 + 420 nodes; the first root move
    # at depth 2 alone would take another 421
    res = SearchService(random.Random(0)).search(Position.startpos(), depth=2, node_budget=450)
    assert res.stopped
    assert res.depth == 1
    assert res.nodes < 520
    assert [it["depth"] for it in res.iters] == [0, 1]
