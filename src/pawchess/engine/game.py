from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from .attacks import in_check
from .board import Board, STARTPOS_FEN, square_coords
from .castling import CastlingRights, flag_for_rook_home, route_for
from .errors import IllegalMoveError, NoPendingPromotionError
from .legality import all_legal_moves, has_legal_move, legal_moves
from .movegen import en_passant_victim
from .move import Move, square_to_str, str_to_square
from .piece import PROMOTION_KINDS, Kind, Piece, Side


class MoveStatus(str, Enum):
    APPLIED = "applied"
    AWAITING = "awaiting"


class Outcome(str, Enum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    KING_CAPTURED = "king_captured"


@dataclass
class GameState:
    """Authoritative state of one chess game.

    Responsibility: hold the board and turn bookkeeping, apply validated
    moves, and detect the end of the game.

    Notes:
    - ``side_to_move is None`` marks a finished game; see ``outcome``.
    - While ``pending_promotion`` is set the state is ``locked`` and the turn
      has not passed yet.
    - ``selection`` is UI bookkeeping only; the rules never read it.
    """

    board: Board
    side_to_move: Optional[Side] = Side.WHITE
    castling: CastlingRights = field(default_factory=CastlingRights)
    ep_square: Optional[int] = None
    selection: Optional[int] = None
    pending_promotion: Optional[int] = None
    locked: bool = False
    outcome: Optional[Outcome] = None
    winner: Optional[Side] = None
    check: bool = False
    halfmove_clock: int = 0
    fullmove_number: int = 1
    history: List[Move] = field(default_factory=list)
    # from/to of the move suspended on a promotion choice
    _pending_move: Optional[Move] = field(default=None, repr=False)
    # side that would have moved next when the game ended (for FEN output)
    _idle_side: Optional[Side] = field(default=None, repr=False)

    @classmethod
    def new(cls) -> "GameState":
        return cls.from_fen(STARTPOS_FEN)

    @classmethod
    def from_fen(cls, fen: str) -> "GameState":
        """Create a game from a Forsyth–Edwards Notation (FEN) string.

        Args:
            fen (str): FEN with 4 or 6 fields; move counters default to
                ``0 1`` when omitted.

        Returns:
            GameState: Fresh state for the encoded position. Terminal
                conditions are evaluated immediately, so a mated or
                stalemated position loads as finished.

        Raises:
            ValueError: If ``fen`` is empty or has invalid placement, side to
                move, castling rights, en-passant square, or counters.
        """
        if not fen or not isinstance(fen, str):
            raise ValueError("FEN must be a non-empty string")
        parts = fen.strip().split()
        if len(parts) == 4:
            parts += ["0", "1"]
        if len(parts) != 6:
            raise ValueError("FEN must have 4 or 6 fields")
        placement, stm, castling, ep, halfmove, fullmove = parts

        board = Board.from_placement(placement)
        if stm not in ("w", "b"):
            raise ValueError("side to move must be 'w' or 'b'")
        rights = CastlingRights.from_fen(castling)

        ep_square: Optional[int]
        if ep == "-":
            ep_square = None
        else:
            try:
                ep_square = str_to_square(ep)
            except ValueError as e:
                raise ValueError("invalid en passant square") from e
            # White captures onto rank 6 (row 2), Black onto rank 3 (row 5)
            if ep_square // 8 != (2 if stm == "w" else 5):
                raise ValueError("invalid en passant square rank")

        try:
            halfmove_clock = int(halfmove)
            fullmove_number = int(fullmove)
        except ValueError as e:
            raise ValueError("invalid move counters in FEN") from e
        if halfmove_clock < 0 or fullmove_number <= 0:
            raise ValueError("invalid move counters in FEN")

        state = cls(
            board=board,
            side_to_move=Side(stm),
            castling=rights,
            ep_square=ep_square,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )
        if not state._check_kings():
            state.evaluate_terminal()
        return state

    def to_fen(self) -> str:
        """Serialize the position into FEN.

        A finished game reports the side that would have moved next.
        """
        stm = self.side_to_move or self._idle_side or Side.WHITE
        ep = square_to_str(self.ep_square) if self.ep_square is not None else "-"
        return (
            f"{self.board.to_placement()} {stm.value} {self.castling.to_fen()} {ep} "
            f"{self.halfmove_clock} {self.fullmove_number}"
        )

    def copy(self) -> "GameState":
        return GameState(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
            selection=self.selection,
            pending_promotion=self.pending_promotion,
            locked=self.locked,
            outcome=self.outcome,
            winner=self.winner,
            check=self.check,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            history=list(self.history),
            _pending_move=self._pending_move,
            _idle_side=self._idle_side,
        )

    # --- Queries ---
    @property
    def is_over(self) -> bool:
        return self.side_to_move is None

    def legal_destinations(self, from_sq: int) -> Set[int]:
        """Legal destinations for the piece on ``from_sq`` if it may move now."""
        if self.side_to_move is None or self.locked:
            return set()
        return legal_moves(
            self.board,
            from_sq,
            self.side_to_move,
            castling=self.castling,
            ep_square=self.ep_square,
        )

    def legal_moves(self) -> List[Move]:
        if self.side_to_move is None or self.locked:
            return []
        return all_legal_moves(
            self.board, self.side_to_move, castling=self.castling, ep_square=self.ep_square
        )

    def is_promotion(self, from_sq: int, to_sq: int) -> bool:
        piece = self.board[from_sq]
        return (
            piece is not None
            and piece.kind is Kind.PAWN
            and square_coords(to_sq)[1] == piece.side.last_row
        )

    # --- Transitions ---
    def apply_move(
        self,
        from_sq: int,
        to_sq: int,
        promotion: Optional[Kind] = None,
        *,
        side: Optional[Side] = None,
        validate: bool = True,
        evaluate: bool = True,
    ) -> MoveStatus:
        """Apply a move for the side to move, in place.

        Args:
            from_sq (int): Origin square.
            to_sq (int): Destination square.
            promotion (Optional[Kind]): Piece for a pawn reaching the far row.
                When omitted for such a move the state suspends in
                ``AWAITING`` until ``complete_promotion`` is called.
            side (Optional[Side]): Expected mover; must match the side to move.
            validate (bool): Check the move against ``legal_destinations``.
                Only callers that generated the move themselves skip this.
            evaluate (bool): Run ``evaluate_terminal`` after the move.

        Returns:
            MoveStatus: ``APPLIED`` or ``AWAITING``.

        Raises:
            IllegalMoveError: If the game is over or locked, ``side`` is not
                the side to move, or the move is not legal.
            ValueError: If ``promotion`` is not a queen, rook, bishop or knight.
        """
        mover_side = self.side_to_move
        if mover_side is None:
            raise IllegalMoveError("game is over")
        if self.locked:
            raise IllegalMoveError("awaiting promotion choice")
        if side is not None and side is not mover_side:
            raise IllegalMoveError(f"not {side.label}'s turn")
        if promotion is not None and promotion not in PROMOTION_KINDS:
            raise ValueError(f"invalid promotion piece: {promotion!r}")
        if validate and to_sq not in self.legal_destinations(from_sq):
            raise IllegalMoveError("illegal move")

        board = self.board
        mover = board[from_sq]
        if mover is None or mover.side is not mover_side:
            raise IllegalMoveError("no piece to move from from_sq")
        captured = board[to_sq]
        promoting = self.is_promotion(from_sq, to_sq)

        # En passant removes the pawn behind the (empty) target square
        victim = en_passant_victim(board, from_sq, to_sq, self.ep_square)
        if victim is not None:
            captured = board[victim]
            board[victim] = None

        board[to_sq] = mover
        board[from_sq] = None

        if mover.kind is Kind.KING:
            route = route_for(mover.side, from_sq, to_sq)
            if route is not None:
                board[route.rook_to] = board[route.rook_from]
                board[route.rook_from] = None

        self._update_castling_rights(mover, from_sq, to_sq, captured)

        self.ep_square = None
        if mover.kind is Kind.PAWN and abs(to_sq - from_sq) == 16:
            self.ep_square = (from_sq + to_sq) // 2

        if mover.kind is Kind.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if promoting:
            if promotion is None:
                self.pending_promotion = to_sq
                self.locked = True
                self._pending_move = Move(from_sq, to_sq)
                return MoveStatus.AWAITING
            board[to_sq] = Piece(promotion, mover.side)
        else:
            promotion = None

        self._finish_move(Move(from_sq, to_sq, promotion), evaluate=evaluate)
        return MoveStatus.APPLIED

    def complete_promotion(self, kind: Kind, *, evaluate: bool = True) -> None:
        """Resolve a pending promotion with ``kind`` and pass the turn.

        Raises:
            NoPendingPromotionError: If no promotion is pending.
            ValueError: If ``kind`` is not a queen, rook, bishop or knight.
        """
        if self.pending_promotion is None or self._pending_move is None:
            raise NoPendingPromotionError("no promotion pending")
        if kind not in PROMOTION_KINDS:
            raise ValueError(f"invalid promotion piece: {kind!r}")
        sq = self.pending_promotion
        pawn = self.board[sq]
        if pawn is None:
            raise NoPendingPromotionError("promotion square is empty")
        self.board[sq] = Piece(kind, pawn.side)
        move = Move(self._pending_move.from_sq, self._pending_move.to_sq, kind)
        self.pending_promotion = None
        self._pending_move = None
        self.locked = False
        self._finish_move(move, evaluate=evaluate)

    def evaluate_terminal(self) -> Optional[Outcome]:
        """Detect checkmate or stalemate for the side to move.

        Returns:
            Optional[Outcome]: The outcome when the game just ended, else
                ``None``. The ``check`` notice is refreshed either way.
        """
        side = self.side_to_move
        if side is None:
            return self.outcome
        self.check = in_check(self.board, side)
        if has_legal_move(self.board, side, castling=self.castling, ep_square=self.ep_square):
            return None
        if self.check:
            self._end(Outcome.CHECKMATE, winner=side.opponent)
        else:
            self._end(Outcome.STALEMATE, winner=None)
        return self.outcome

    # --- Internals ---
    def _finish_move(self, move: Move, *, evaluate: bool) -> None:
        mover_side = self.side_to_move
        if mover_side is None:
            raise IllegalMoveError("game is over")
        self.history.append(move)
        if mover_side is Side.BLACK:
            self.fullmove_number += 1
        self.side_to_move = mover_side.opponent
        self.check = False
        if self._check_kings():
            return
        if evaluate:
            self.evaluate_terminal()

    def _check_kings(self) -> bool:
        """End the game if a king has left the board; return True if ended."""
        white_king = self.board.king_square(Side.WHITE) is not None
        black_king = self.board.king_square(Side.BLACK) is not None
        if white_king and black_king:
            return False
        winner = None
        if white_king:
            winner = Side.WHITE
        elif black_king:
            winner = Side.BLACK
        self._end(Outcome.KING_CAPTURED, winner=winner)
        return True

    def _end(self, outcome: Outcome, *, winner: Optional[Side]) -> None:
        if self.side_to_move is not None:
            self._idle_side = self.side_to_move
        self.outcome = outcome
        self.winner = winner
        self.side_to_move = None
        self.selection = None

    def _update_castling_rights(
        self, mover: Piece, from_sq: int, to_sq: int, captured: Optional[Piece]
    ) -> None:
        """Revoke rights for king/rook moves and rook captures on home squares."""
        revoked = []
        if mover.kind is Kind.KING:
            if mover.side is Side.WHITE:
                revoked += ["white_kingside", "white_queenside"]
            else:
                revoked += ["black_kingside", "black_queenside"]
        elif mover.kind is Kind.ROOK:
            flag = flag_for_rook_home(from_sq)
            if flag is not None and flag.startswith(mover.side.name.lower()):
                revoked.append(flag)
        if captured is not None and captured.kind is Kind.ROOK:
            flag = flag_for_rook_home(to_sq)
            if flag is not None and flag.startswith(captured.side.name.lower()):
                revoked.append(flag)
        if revoked:
            self.castling = self.castling.revoke(*revoked)
