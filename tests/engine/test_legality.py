from __future__ import annotations

from pawchess.engine.board import Board
from pawchess.engine.game import GameState
from pawchess.engine.legality import all_legal_moves, legal_moves, simulate
from pawchess.engine.move import str_to_square as sq
from pawchess.engine.movegen import pseudo_moves
from pawchess.engine.piece import Side


def test_startpos_has_twenty_moves() -> None:
    st = GameState.new()
    assert len(st.legal_moves()) == 20
    assert len(all_legal_moves(Board.startpos(), Side.BLACK)) == 20


def test_pinned_knight_cannot_move() -> None:
    b = Board.from_placement("4r1k1/8/8/8/8/8/4N3/4K3")
    assert pseudo_moves(b, sq("e2"), Side.WHITE)
    assert legal_moves(b, sq("e2"), Side.WHITE) == set()


def test_pinned_rook_moves_only_along_pin() -> None:
    b = Board.from_placement("4r1k1/8/8/8/8/8/4R3/4K3")
    dests = legal_moves(b, sq("e2"), Side.WHITE)
    assert sq("d2") in pseudo_moves(b, sq("e2"), Side.WHITE)
    assert dests == {sq(n) for n in ("e3", "e4", "e5", "e6", "e7", "e8")}


def test_king_cannot_step_into_attack() -> None:
    b = Board.from_placement("4k3/8/8/8/8/8/r7/4K3")
    assert legal_moves(b, sq("e1"), Side.WHITE) == {sq("d1"), sq("f1")}


def test_king_cannot_capture_defended_piece() -> None:
    # Black rook e2 is defended by the black king e3
    b = Board.from_placement("8/8/8/8/8/4k3/4r3/4K3")
    assert sq("e2") not in legal_moves(b, sq("e1"), Side.WHITE)


def test_check_must_be_answered() -> None:
    # White in check from rook e8; only blocks, captures and king moves help
    st = GameState.from_fen("k3r3/8/8/8/8/8/3B4/4K3 w - - 0 1")
    assert st.check
    moves = {m.to_uci() for m in st.legal_moves()}
    assert "d2e3" in moves
    assert "d2c3" not in moves
    assert "e1e2" not in moves
    assert "e1d1" in moves


def test_simulate_does_not_touch_original() -> None:
    b = Board.startpos()
    before = list(b.cells)
    after = simulate(b, sq("e2"), sq("e4"))
    assert b.cells == before
    assert after[sq("e4")] == b[sq("e2")]
    assert after[sq("e2")] is None


def test_legal_queries_leave_state_untouched() -> None:
    st = GameState.from_fen("r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1")
    fen = st.to_fen()
    st.legal_moves()
    for s in range(64):
        st.legal_destinations(s)
    assert st.to_fen() == fen
