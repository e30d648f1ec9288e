from __future__ import annotations

import pytest

from pawchess.engine.game import GameState
from pawchess.engine.move import str_to_square as sq
from pawchess.engine.piece import Kind, Piece, Side


def _king_dests(fen: str, king: str = "e1") -> set[int]:
    return GameState.from_fen(fen).legal_destinations(sq(king))


def test_white_castling_available_when_clear_and_not_in_check() -> None:
    dests = _king_dests("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert sq("g1") in dests
    assert sq("c1") in dests


def test_black_castling_available() -> None:
    dests = _king_dests("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1", king="e8")
    assert sq("g8") in dests
    assert sq("c8") in dests


def test_castling_needs_the_right() -> None:
    dests = _king_dests("r3k2r/8/8/8/8/8/8/R3K2R w Kkq - 0 1")
    assert sq("g1") in dests
    assert sq("c1") not in dests


@pytest.mark.parametrize(
    "fen, blocked, allowed",
    [
        # f1 (transit) attacked by rook f8
        ("r3kr2/8/8/8/8/8/8/R3K2R w KQq - 0 1", "g1", "c1"),
        # g1 (destination) attacked by rook g8
        ("r3k1r1/8/8/8/8/8/8/R3K2R w KQq - 0 1", "g1", "c1"),
        # d1 (transit) attacked by rook d8
        ("r2rk2r/8/8/8/8/8/8/R3K2R w KQk - 0 1", "c1", "g1"),
    ],
)
def test_castling_through_or_into_attack_is_illegal(fen: str, blocked: str, allowed: str) -> None:
    dests = _king_dests(fen)
    assert sq(blocked) not in dests
    assert sq(allowed) in dests


def test_castling_out_of_check_is_illegal() -> None:
    dests = _king_dests("r3k2r/4r3/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert sq("g1") not in dests
    assert sq("c1") not in dests


def test_queenside_b_file_attack_does_not_matter() -> None:
    # b1 is attacked but the king never crosses it
    dests = _king_dests("1r2k2r/8/8/8/8/8/8/R3K2R w KQk - 0 1")
    assert sq("c1") in dests


@pytest.mark.parametrize(
    "fen, blocked, allowed",
    [
        ("r3k2r/8/8/8/8/8/8/RN2K2R w KQkq - 0 1", "c1", "g1"),
        ("r3k2r/8/8/8/8/8/8/R3KB1R w KQkq - 0 1", "g1", "c1"),
        ("r3k2r/8/8/8/8/8/8/R2QK2R w KQkq - 0 1", "c1", "g1"),
    ],
)
def test_castling_needs_empty_squares_between(fen: str, blocked: str, allowed: str) -> None:
    dests = _king_dests(fen)
    assert sq(blocked) not in dests
    assert sq(allowed) in dests


def test_kingside_castle_hops_rook() -> None:
    st = GameState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    count = st.board.piece_count()
    st.apply_move(sq("e1"), sq("g1"))
    assert st.board[sq("g1")] == Piece(Kind.KING, Side.WHITE)
    assert st.board[sq("f1")] == Piece(Kind.ROOK, Side.WHITE)
    assert st.board[sq("h1")] is None
    assert st.board[sq("e1")] is None
    assert st.board.piece_count() == count
    assert not st.castling.white_kingside and not st.castling.white_queenside
    assert st.castling.black_kingside and st.castling.black_queenside


def test_black_queenside_castle_hops_rook() -> None:
    st = GameState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    st.apply_move(sq("e8"), sq("c8"))
    assert st.board[sq("c8")] == Piece(Kind.KING, Side.BLACK)
    assert st.board[sq("d8")] == Piece(Kind.ROOK, Side.BLACK)
    assert st.board[sq("a8")] is None
    assert st.to_fen().split()[2] == "KQ"


def test_rook_capture_on_home_square_revokes_both_corners() -> None:
    st = GameState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    st.apply_move(sq("a1"), sq("a8"))
    assert not st.castling.white_queenside  # rook left a1
    assert not st.castling.black_queenside  # rook captured on a8
    assert st.castling.white_kingside and st.castling.black_kingside


def test_rights_stay_revoked_after_king_returns() -> None:
    st = GameState.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    for m in ("e1e2", "a8b8", "e2e1", "b8a8"):
        st.apply_move(sq(m[:2]), sq(m[2:]))
    assert sq("g1") not in st.legal_destinations(sq("e1"))
    assert sq("c1") not in st.legal_destinations(sq("e1"))
    assert st.castling.black_kingside and not st.castling.black_queenside


def test_right_without_rook_does_not_castle() -> None:
    dests = _king_dests("4k3/8/8/8/8/8/8/4K2R w KQ - 0 1")
    assert sq("g1") in dests
    assert sq("c1") not in dests
