from __future__ import annotations

from typing import Tuple

from .board import Board, coords_to_square, on_board, square_coords
from .piece import Kind, Side


Offsets = Tuple[Tuple[int, int], ...]

KNIGHT_OFFSETS: Offsets = ((1, 2), (2, 1), (2, -1), (1, -2), (-1, -2), (-2, -1), (-2, 1), (-1, 2))
KING_OFFSETS: Offsets = ((1, 0), (-1, 0), (0, 1), (0, -1), (1, 1), (1, -1), (-1, 1), (-1, -1))
ROOK_DIRS: Offsets = ((1, 0), (-1, 0), (0, 1), (0, -1))
BISHOP_DIRS: Offsets = ((1, 1), (1, -1), (-1, 1), (-1, -1))
QUEEN_DIRS: Offsets = ROOK_DIRS + BISHOP_DIRS


def is_attacked(board: Board, sq: int, by_side: Side) -> bool:
    """Return True if square ``sq`` is attacked by ``by_side`` on ``board``.

    Covers pawns, knights, king, and slider rays for bishops/rooks/queens.
    The square itself may be empty or occupied by either side.
    """
    f, r = square_coords(sq)

    # Pawn attacks: an attacking pawn stands one row behind sq from its own
    # point of view
    pr = r - by_side.advance
    for df in (-1, 1):
        pf = f + df
        if on_board(pf, pr):
            p = board[coords_to_square(pf, pr)]
            if p is not None and p.side is by_side and p.kind is Kind.PAWN:
                return True

    for df, dr in KNIGHT_OFFSETS:
        tf, tr = f + df, r + dr
        if on_board(tf, tr):
            p = board[coords_to_square(tf, tr)]
            if p is not None and p.side is by_side and p.kind is Kind.KNIGHT:
                return True

    for df, dr in KING_OFFSETS:
        tf, tr = f + df, r + dr
        if on_board(tf, tr):
            p = board[coords_to_square(tf, tr)]
            if p is not None and p.side is by_side and p.kind is Kind.KING:
                return True

    # Sliders: first occupied square along each ray decides
    for dirs, kinds in (
        (ROOK_DIRS, (Kind.ROOK, Kind.QUEEN)),
        (BISHOP_DIRS, (Kind.BISHOP, Kind.QUEEN)),
    ):
        for df, dr in dirs:
            tf, tr = f + df, r + dr
            while on_board(tf, tr):
                p = board[coords_to_square(tf, tr)]
                if p is not None:
                    if p.side is by_side and p.kind in kinds:
                        return True
                    break
                tf += df
                tr += dr

    return False


def in_check(board: Board, side: Side) -> bool:
    """Return True if ``side``'s king is attacked; False when it has no king."""
    ksq = board.king_square(side)
    if ksq is None:
        return False
    return is_attacked(board, ksq, side.opponent)
