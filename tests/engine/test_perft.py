from __future__ import annotations

import pytest

from plychess.engine.perft import divide, perft
from plychess.engine.position import Position


KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
POSITION_3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"
POSITION_4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


def test_perft_depth_zero_is_one() -> None:
    assert perft(Position.startpos(), 0) == 1


@pytest.mark.parametrize("depth, nodes", [(1, 20), (2, 400), (3, 8902)])
def test_perft_startpos(depth: int, nodes: int) -> None:
    assert perft(Position.startpos(), depth) == nodes


@pytest.mark.parametrize("depth, nodes", [(1, 48), (2, 2039)])
def test_perft_kiwipete(depth: int, nodes: int) -> None:
    assert perft(Position.from_fen(KIWIPETE), depth) == nodes


@pytest.mark.parametrize("depth, nodes", [(1, 14), (2, 191), (3, 2812)])
def test_perft_position_3(depth: int, nodes: int) -> None:
    assert perft(Position.from_fen(POSITION_3), depth) == nodes


@pytest.mark.parametrize("depth, nodes", [(1, 6), (2, 264)])
def test_perft_position_4(depth: int, nodes: int) -> None:
    assert perft(Position.from_fen(POSITION_4), depth) == nodes


def test_divide_sums_to_perft() -> None:
    p = Position.startpos()
    split = divide(p, 2)
    assert len(split) == 20
    assert all(n == 20 for n in split.values())
    assert sum(split.values()) == perft(p, 2)


def test_negative_depth_rejected() -> None:
    with pytest.raises(ValueError):
        perft(Position.startpos(), -1)
    with pytest.raises(ValueError):
        divide(Position.startpos(), 0)
