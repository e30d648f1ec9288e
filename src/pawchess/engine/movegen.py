from __future__ import annotations

from typing import Optional, Set

from .attacks import BISHOP_DIRS, KING_OFFSETS, KNIGHT_OFFSETS, QUEEN_DIRS, ROOK_DIRS, Offsets
from .attacks import is_attacked
from .board import Board, coords_to_square, on_board, square_coords
from .castling import KING_HOME, ROUTES, CastlingRights
from .piece import Kind, Piece, Side


NO_CASTLING = CastlingRights.none()


def en_passant_victim(board: Board, from_sq: int, to_sq: int, ep_square: Optional[int]) -> Optional[int]:
    """Return the square of the pawn captured en passant by this move, if any.

    Only an opponent pawn directly behind the target can be taken; a stale
    or malformed target yields ``None``.
    """
    mover = board[from_sq]
    if mover is None or mover.kind is not Kind.PAWN:
        return None
    if ep_square is None or to_sq != ep_square or not board.is_empty(to_sq):
        return None
    # The victim sits one row behind the destination from the mover's view
    victim = to_sq - 8 * mover.side.advance
    if not 0 <= victim < 64 or board[victim] != Piece(Kind.PAWN, mover.side.opponent):
        return None
    return victim


def pseudo_moves(
    board: Board,
    from_sq: int,
    side: Side,
    *,
    castling: CastlingRights = NO_CASTLING,
    ep_square: Optional[int] = None,
) -> Set[int]:
    """Return pseudo-legal destination squares for the piece on ``from_sq``.

    Args:
        board (Board): Position to read.
        from_sq (int): Origin square.
        side (Side): Side that wants to move; pieces of the other side (and
            empty squares) yield no moves.
        castling (CastlingRights): Rights consulted for king castling moves.
        ep_square (Optional[int]): Current en-passant target, if any.

    Returns:
        Set[int]: Destinations obeying piece movement rules. Squares held by
            ``side`` are never included. Moves that leave the own king in
            check are not filtered out here.
    """
    piece = board[from_sq]
    if piece is None or piece.side is not side:
        return set()

    kind = piece.kind
    if kind is Kind.PAWN:
        return _pawn_moves(board, from_sq, side, ep_square)
    if kind is Kind.KNIGHT:
        return _step_moves(board, from_sq, side, KNIGHT_OFFSETS)
    if kind is Kind.BISHOP:
        return _slide_moves(board, from_sq, side, BISHOP_DIRS)
    if kind is Kind.ROOK:
        return _slide_moves(board, from_sq, side, ROOK_DIRS)
    if kind is Kind.QUEEN:
        return _slide_moves(board, from_sq, side, QUEEN_DIRS)
    moves = _step_moves(board, from_sq, side, KING_OFFSETS)
    moves |= _castling_moves(board, from_sq, side, castling)
    return moves


def _pawn_moves(board: Board, from_sq: int, side: Side, ep_square: Optional[int]) -> Set[int]:
    moves: Set[int] = set()
    f, r = square_coords(from_sq)
    step = side.advance

    # Pushes
    r1 = r + step
    if on_board(f, r1) and board.is_empty(coords_to_square(f, r1)):
        moves.add(coords_to_square(f, r1))
        r2 = r + 2 * step
        if r == side.pawn_row and board.is_empty(coords_to_square(f, r2)):
            moves.add(coords_to_square(f, r2))

    # Captures, including en passant onto the recorded target
    for df in (-1, 1):
        tf = f + df
        if not on_board(tf, r1):
            continue
        to_sq = coords_to_square(tf, r1)
        if board.holds(to_sq, side.opponent):
            moves.add(to_sq)
        elif en_passant_victim(board, from_sq, to_sq, ep_square) is not None:
            moves.add(to_sq)
    return moves


def _step_moves(board: Board, from_sq: int, side: Side, offsets: Offsets) -> Set[int]:
    moves: Set[int] = set()
    f, r = square_coords(from_sq)
    for df, dr in offsets:
        tf, tr = f + df, r + dr
        if on_board(tf, tr):
            to_sq = coords_to_square(tf, tr)
            if not board.holds(to_sq, side):
                moves.add(to_sq)
    return moves


def _slide_moves(board: Board, from_sq: int, side: Side, dirs: Offsets) -> Set[int]:
    moves: Set[int] = set()
    f, r = square_coords(from_sq)
    for df, dr in dirs:
        tf, tr = f + df, r + dr
        while on_board(tf, tr):
            to_sq = coords_to_square(tf, tr)
            target = board[to_sq]
            if target is None:
                moves.add(to_sq)
            else:
                if target.side is not side:
                    moves.add(to_sq)
                break
            tf += df
            tr += dr
    return moves


def _castling_moves(board: Board, from_sq: int, side: Side, castling: CastlingRights) -> Set[int]:
    moves: Set[int] = set()
    if from_sq != KING_HOME[side]:
        return moves
    rook = Piece(Kind.ROOK, side)
    for route in ROUTES:
        if route.side is not side or not castling.allows(route):
            continue
        if board[route.rook_from] != rook:
            continue
        if not all(board.is_empty(sq) for sq in route.between):
            continue
        if any(is_attacked(board, sq, side.opponent) for sq in route.king_path):
            continue
        moves.add(route.king_to)
    return moves
