from __future__ import annotations

from plychess.engine.legal import generate_legal_moves
from plychess.engine.move import str_to_square
from plychess.engine.movegen import bishop_moves, queen_moves, rook_moves
from plychess.engine.position import Position


def moves_set(p: Position) -> set[str]:
    return {m.to_uci() for m in generate_legal_moves(p)}


def test_rook_basic_moves() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
    ms = moves_set(p)
    assert {"a1a2", "a1a8", "a1b1", "a1d1"}.issubset(ms)
    # e1 holds the own king
    assert "a1e1" not in ms


def test_bishop_basic_moves() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/8/2B1K3 w - - 0 1")
    ms = moves_set(p)
    assert {"c1b2", "c1a3", "c1d2", "c1h6"}.issubset(ms)


def test_queen_basic_moves() -> None:
    p = Position.from_fen("4k3/8/8/8/8/8/8/3QK3 w - - 0 1")
    ms = moves_set(p)
    assert {"d1d2", "d1c1", "d1c2", "d1d8", "d1h5"}.issubset(ms)


def test_ray_stops_on_capture_and_before_friend() -> None:
    # Rook d4: black pawn on d6 (capturable), white pawn on f4 (blocks)
    p = Position.from_fen("4k3/8/3p4/8/3R1P2/8/8/4K3 w - - 0 1")
    got = {m.to_uci() for m in rook_moves(p, str_to_square("d4"))}
    assert "d4d6" in got and "d4d7" not in got
    assert "d4e4" in got and "d4f4" not in got
    assert {"d4d1", "d4a4"}.issubset(got)
    assert len(got) == 9


def test_bishop_count_from_center_of_empty_board() -> None:
    p = Position.from_fen("7k/8/8/8/3B4/8/8/K7 w - - 0 1")
    # h8 holds the enemy king: capture included, a1 holds the own king: excluded
    got = {m.to_uci() for m in bishop_moves(p, str_to_square("d4"))}
    assert "d4h8" in got and "d4a1" not in got
    assert len(got) == 12


def test_queen_is_rook_plus_bishop() -> None:
    p = Position.from_fen("4k3/8/8/8/3Q4/8/8/4K3 w - - 0 1")
    d4 = str_to_square("d4")
    q = {m.to_uci() for m in queen_moves(p, d4)}
    r = {m.to_uci() for m in rook_moves(p, d4)}
    b = {m.to_uci() for m in bishop_moves(p, d4)}
    assert q == r | b


def test_pinned_rook_move_filtered() -> None:
    # Black rook e8 pins the white rook on e2 to its king
    p = Position.from_fen("4r1k1/8/8/8/8/8/4R3/4K3 w - - 0 1")
    ms = moves_set(p)
    assert "e2d2" not in ms and "e2f2" not in ms
    assert "e2e3" in ms and "e2e8" in ms
