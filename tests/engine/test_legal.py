from __future__ import annotations

import pytest

from plychess.engine.attacks import is_attacked, king_square
from plychess.engine.legal import generate_legal_moves
from plychess.engine.position import STARTPOS_FEN, Position
from plychess.engine.transition import apply_move


KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


@pytest.mark.parametrize(
    "fen",
    [
        STARTPOS_FEN,
        KIWIPETE,
        "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1",
        "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1",
        "4r1k1/8/8/8/8/8/4R3/4K3 w - - 0 1",
    ],
)
def test_no_legal_move_leaves_own_king_attacked(fen: str) -> None:
    p = Position.from_fen(fen)
    mover = p.side_to_move
    moves = generate_legal_moves(p)
    assert moves
    for mv in moves:
        nxt = apply_move(p, mv)
        ks = king_square(nxt, mover)
        assert ks is not None
        assert not is_attacked(nxt, ks, mover), mv.to_uci()


def test_in_check_only_evasions_are_legal() -> None:
    # White king e1 checked by rook e8; bishop f1 can't help, king must step aside
    p = Position.from_fen("4r1k1/8/8/8/8/8/8/4KB2 w - - 0 1")
    got = {m.to_uci() for m in generate_legal_moves(p)}
    assert got == {"e1d1", "e1d2", "e1f2", "f1e2"}


def test_king_cannot_capture_defended_piece() -> None:
    p = Position.from_fen("4k3/8/8/8/8/2b5/3q4/4K3 w - - 0 1")
    assert "e1d2" not in {m.to_uci() for m in generate_legal_moves(p)}


def test_en_passant_exposing_king_on_rank_is_illegal() -> None:
    # Capturing e5xd6 ep would open the fifth rank between rook h5 and king a5
    p = Position.from_fen("8/8/8/K2pP2r/8/8/8/7k w - d6 0 1")
    assert "e5d6" not in {m.to_uci() for m in generate_legal_moves(p)}


def test_generation_for_side_not_to_move() -> None:
    p = Position.startpos()
    black = {m.to_uci() for m in generate_legal_moves(p, p.side_to_move.opponent)}
    assert "e7e5" in black and "g8f6" in black
