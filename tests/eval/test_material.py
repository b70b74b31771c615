from __future__ import annotations

import pytest

from plychess.engine.position import Position
from plychess.eval import DRAW, LOSS, MATERIAL_VALUES, WIN, evaluate, utility


FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


def test_startpos_material_is_balanced() -> None:
    assert evaluate(Position.startpos()) == 0


@pytest.mark.parametrize(
    "fen, expected",
    [
        ("rnb1kbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1", 9),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/1NBQKBNR w Kkq - 0 1", -5),
        ("4k3/8/8/8/8/8/PPP5/4K3 w - - 0 1", 3),
        ("3nkb2/8/8/8/8/8/8/4K3 b - - 0 1", -6),
    ],
)
def test_material_difference(fen: str, expected: int) -> None:
    assert evaluate(Position.from_fen(fen)) == expected


def test_kings_carry_no_material() -> None:
    assert sum(MATERIAL_VALUES.values()) == 1 + 3 + 3 + 5 + 9
    assert evaluate(Position.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")) == 0


def test_utility_of_terminal_positions() -> None:
    assert utility(Position.from_fen("7k/6Q1/6K1/8/8/8/8/8 b - - 0 1")) == WIN
    assert utility(Position.from_fen(FOOLS_MATE)) == LOSS
    assert utility(Position.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")) == DRAW
    assert utility(Position.from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")) == DRAW


def test_utility_is_none_for_live_positions() -> None:
    assert utility(Position.startpos()) is None


def test_mate_scores_dominate_material() -> None:
    assert WIN > 10_000 and LOSS < -10_000
    assert LOSS < DRAW < WIN
