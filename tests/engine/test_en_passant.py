from __future__ import annotations

from pawchess.engine.board import Board
from pawchess.engine.game import GameState
from pawchess.engine.legality import legal_moves
from pawchess.engine.move import str_to_square as sq
from pawchess.engine.movegen import en_passant_victim, pseudo_moves
from pawchess.engine.piece import Kind, Piece, Side


def _play(st: GameState, *moves: str) -> None:
    for m in moves:
        st.apply_move(sq(m[:2]), sq(m[2:4]))


def test_double_push_opens_window_for_adjacent_pawn() -> None:
    st = GameState.from_fen("4k3/4p3/8/3P4/8/8/8/4K3 b - - 0 1")
    _play(st, "e7e5")
    assert st.ep_square == sq("e6")
    assert sq("e6") in st.legal_destinations(sq("d5"))


def test_en_passant_capture_removes_passed_pawn() -> None:
    st = GameState.from_fen("4k3/4p3/8/3P4/8/8/8/4K3 b - - 0 1")
    _play(st, "e7e5")
    count = st.board.piece_count()
    _play(st, "d5e6")
    assert st.board[sq("e6")] == Piece(Kind.PAWN, Side.WHITE)
    assert st.board[sq("e5")] is None
    assert st.board[sq("d5")] is None
    assert st.board.piece_count() == count - 1
    assert st.ep_square is None


def test_window_closes_after_any_other_move() -> None:
    st = GameState.from_fen("4k3/4p3/8/3P4/8/8/8/4K3 b - - 0 1")
    _play(st, "e7e5", "e1e2", "e8d8")
    assert st.ep_square is None
    assert sq("e6") not in st.legal_destinations(sq("d5"))


def test_black_en_passant_capture() -> None:
    st = GameState.from_fen("4k3/8/8/8/3p4/8/4P3/4K3 w - - 0 1")
    _play(st, "e2e4")
    assert st.to_fen() == "4k3/8/8/8/3pP3/8/8/4K3 b - e3 0 1"
    _play(st, "d4e3")
    assert st.board[sq("e3")] == Piece(Kind.PAWN, Side.BLACK)
    assert st.board[sq("e4")] is None


def test_en_passant_that_exposes_king_on_rank_is_illegal() -> None:
    # Removing both pawns from rank 5 would open the h5 rook onto the a5 king
    st = GameState.from_fen("8/8/8/K2Pp2r/8/8/8/4k3 w - e6 0 1")
    b = st.board
    assert sq("e6") in pseudo_moves(b, sq("d5"), Side.WHITE, ep_square=st.ep_square)
    assert sq("e6") not in legal_moves(b, sq("d5"), Side.WHITE, ep_square=st.ep_square)
    assert sq("d6") in st.legal_destinations(sq("d5"))


def test_target_without_opponent_pawn_behind_is_not_capturable() -> None:
    # Own pawn on e2 behind an e3 target: nothing to take
    b = Board.from_placement("4k3/8/8/8/8/8/3PP3/4K3")
    assert en_passant_victim(b, sq("d2"), sq("e3"), sq("e3")) is None
    assert sq("e3") not in pseudo_moves(b, sq("d2"), Side.WHITE, ep_square=sq("e3"))

    # Stale target with the victim square empty
    b = Board.from_placement("4k3/8/8/3P4/8/8/8/4K3")
    assert en_passant_victim(b, sq("d5"), sq("e6"), sq("e6")) is None
    assert pseudo_moves(b, sq("d5"), Side.WHITE, ep_square=sq("e6")) == {sq("d6")}


def test_victim_is_the_opponent_pawn_behind_the_target() -> None:
    b = Board.from_placement("4k3/8/8/3Pp3/8/8/8/4K3")
    assert en_passant_victim(b, sq("d5"), sq("e6"), sq("e6")) == sq("e5")
