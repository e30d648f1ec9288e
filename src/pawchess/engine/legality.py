from __future__ import annotations

from typing import List, Optional, Set

from .attacks import in_check
from .board import Board
from .castling import CastlingRights
from .move import Move
from .movegen import NO_CASTLING, en_passant_victim, pseudo_moves
from .piece import Side


def simulate(board: Board, from_sq: int, to_sq: int, ep_square: Optional[int] = None) -> Board:
    """Apply a move mechanically to a clone of ``board`` and return the clone.

    Relocates the piece and removes an en-passant victim. Castling's rook hop
    and promotion are skipped; neither changes whether the own king is
    attacked.
    """
    scratch = board.copy()
    victim = en_passant_victim(board, from_sq, to_sq, ep_square)
    if victim is not None:
        scratch[victim] = None
    scratch[to_sq] = scratch[from_sq]
    scratch[from_sq] = None
    return scratch


def legal_moves(
    board: Board,
    from_sq: int,
    side: Side,
    *,
    castling: CastlingRights = NO_CASTLING,
    ep_square: Optional[int] = None,
) -> Set[int]:
    """Return the legal destinations for the piece on ``from_sq``.

    Filters ``pseudo_moves`` by simulating each candidate on a cloned board
    and rejecting it when ``side``'s king is left attacked.
    """
    legal: Set[int] = set()
    for to_sq in pseudo_moves(board, from_sq, side, castling=castling, ep_square=ep_square):
        if not in_check(simulate(board, from_sq, to_sq, ep_square), side):
            legal.add(to_sq)
    return legal


def all_legal_moves(
    board: Board,
    side: Side,
    *,
    castling: CastlingRights = NO_CASTLING,
    ep_square: Optional[int] = None,
) -> List[Move]:
    """Enumerate every legal ``(from, to)`` pair for ``side``.

    Promotion is left unset on the returned moves; callers pick the piece.
    """
    moves: List[Move] = []
    for from_sq in board.squares_of(side):
        dests = legal_moves(board, from_sq, side, castling=castling, ep_square=ep_square)
        moves.extend(Move(from_sq, to_sq) for to_sq in sorted(dests))
    return moves


def has_legal_move(
    board: Board,
    side: Side,
    *,
    castling: CastlingRights = NO_CASTLING,
    ep_square: Optional[int] = None,
) -> bool:
    for from_sq in board.squares_of(side):
        if legal_moves(board, from_sq, side, castling=castling, ep_square=ep_square):
            return True
    return False
