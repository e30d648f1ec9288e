from __future__ import annotations

from pawchess.engine.board import Board
from pawchess.engine.move import str_to_square as sq
from pawchess.engine.movegen import pseudo_moves
from pawchess.engine.piece import Side


def _squares(*names: str) -> set[int]:
    return {sq(n) for n in names}


def test_startpos_pawn_and_knight_moves() -> None:
    b = Board.startpos()
    assert pseudo_moves(b, sq("e2"), Side.WHITE) == _squares("e3", "e4")
    assert pseudo_moves(b, sq("g1"), Side.WHITE) == _squares("f3", "h3")
    assert pseudo_moves(b, sq("b8"), Side.BLACK) == _squares("a6", "c6")
    assert pseudo_moves(b, sq("f1"), Side.WHITE) == set()


def test_wrong_side_or_empty_square_yields_nothing() -> None:
    b = Board.startpos()
    assert pseudo_moves(b, sq("e7"), Side.WHITE) == set()
    assert pseudo_moves(b, sq("e4"), Side.WHITE) == set()


def test_double_push_needs_both_squares_empty() -> None:
    blocked_near = Board.from_placement("4k3/8/8/8/8/4n3/4P3/4K3")
    assert pseudo_moves(blocked_near, sq("e2"), Side.WHITE) == set()
    blocked_far = Board.from_placement("4k3/8/8/8/4n3/8/4P3/4K3")
    assert pseudo_moves(blocked_far, sq("e2"), Side.WHITE) == _squares("e3")


def test_double_push_only_from_start_row() -> None:
    b = Board.from_placement("4k3/8/8/8/8/4P3/8/4K3")
    assert pseudo_moves(b, sq("e3"), Side.WHITE) == _squares("e4")


def test_pawn_captures_only_opponent_pieces() -> None:
    b = Board.from_placement("4k3/8/8/3p1N2/4P3/8/8/4K3")
    assert pseudo_moves(b, sq("e4"), Side.WHITE) == _squares("e5", "d5")


def test_pawn_en_passant_target_is_a_destination() -> None:
    b = Board.from_placement("4k3/8/8/3Pp3/8/8/8/4K3")
    assert sq("e6") not in pseudo_moves(b, sq("d5"), Side.WHITE)
    dests = pseudo_moves(b, sq("d5"), Side.WHITE, ep_square=sq("e6"))
    assert dests == _squares("d6", "e6")


def test_slider_stops_at_first_piece_and_captures_opponent() -> None:
    # White rook d4, own pawn d6, black knight g4
    b = Board.from_placement("4k3/8/3P4/8/3R2n1/8/8/4K3")
    dests = pseudo_moves(b, sq("d4"), Side.WHITE)
    assert dests == _squares("d5", "d3", "d2", "d1", "a4", "b4", "c4", "e4", "f4", "g4")


def test_queen_covers_both_direction_sets() -> None:
    b = Board.from_placement("4k3/8/8/8/8/8/8/Q3K3")
    dests = pseudo_moves(b, sq("a1"), Side.WHITE)
    assert _squares("a8", "h8", "d1", "b2") <= dests
    assert sq("e1") not in dests


def test_king_steps_ignore_safety() -> None:
    # d2 is attacked by the black rook, yet stays pseudo-legal
    b = Board.from_placement("4k3/8/8/8/8/8/r7/4K3")
    dests = pseudo_moves(b, sq("e1"), Side.WHITE)
    assert dests == _squares("d1", "f1", "d2", "e2", "f2")
