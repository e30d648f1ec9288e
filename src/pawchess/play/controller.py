from __future__ import annotations

import logging
import threading
from typing import Optional, Set

from ..config import Settings
from ..engine.board import Board
from ..engine.errors import IllegalMoveError, NoPendingPromotionError, TurnError
from ..engine.game import GameState, MoveStatus, Outcome
from ..engine.move import Move
from ..engine.piece import Kind, Side
from ..opponent.policy import RandomOpponent
from .scheduler import Scheduler, for_delay


logger = logging.getLogger(__name__)


class ChessController:
    """Drives one game between the player and the pet opponent.

    Responsibilities:
    - Turn square selections into moves (select, deselect, reselect, play)
    - Suspend on promotion until the player picks a piece
    - Schedule the opponent's reply after the configured delay
    - Expose board, move hints and a status line to the rendering layer

    All public methods are serialized by the re-entrant ``lock``, which
    readers also hold to get a consistent view of ``state``; opponent
    callbacks scheduled before a new game carry a stale generation and are
    dropped.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        human_side: Side = Side.WHITE,
        opponent: Optional[RandomOpponent] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.human_side = human_side
        self.opponent_side = human_side.opponent
        self.opponent = opponent or RandomOpponent(seed=self.settings.seed)
        self.scheduler = scheduler or for_delay(self.settings.opponent_delay_ms)
        self.lock = threading.RLock()
        self._gen = 0  # generation id to invalidate stale opponent callbacks
        self._opponent_pending = False
        self.state = GameState.new()
        self._maybe_schedule_opponent()

    # ---- Input from the rendering layer ----
    def on_square_selected(self, index: int) -> None:
        """Handle a click on square ``index``.

        Ignored unless it is the player's turn and input is not locked.

        Raises:
            ValueError: If ``index`` is not a square index.
        """
        if index < 0 or index > 63:
            raise ValueError(f"invalid square index: {index}")
        with self.lock:
            st = self.state
            if st.side_to_move is not self.human_side or st.locked:
                logger.debug("selection ignored", extra={"square": index})
                return
            if st.selection is None:
                if st.board.holds(index, self.human_side):
                    st.selection = index
                return
            if index == st.selection:
                st.selection = None
                return
            if index in st.legal_destinations(st.selection):
                from_sq = st.selection
                st.selection = None
                self._play_human(from_sq, index, None)
                return
            if st.board.holds(index, self.human_side):
                st.selection = index

    def submit_move(self, move: Move) -> MoveStatus:
        """Play ``move`` for the player directly, bypassing selection.

        Raises:
            TurnError: If the game is over, input is locked, or it is the
                opponent's turn.
            IllegalMoveError: If the move is not legal, or names a promotion
                piece for a move that does not promote.
        """
        with self.lock:
            st = self.state
            if st.is_over:
                raise TurnError("game is over")
            if st.locked:
                raise TurnError("awaiting promotion choice")
            if st.side_to_move is not self.human_side:
                raise TurnError("not your turn")
            if move.to_sq not in st.legal_destinations(move.from_sq):
                raise IllegalMoveError("illegal move")
            if move.promotion is not None and not st.is_promotion(move.from_sq, move.to_sq):
                raise IllegalMoveError("promotion piece given for a non-promoting move")
            st.selection = None
            return self._play_human(move.from_sq, move.to_sq, move.promotion)

    def on_promotion_choice(self, kind: Kind) -> None:
        """Resolve the pending promotion with ``kind``.

        Raises:
            NoPendingPromotionError: If no promotion is pending.
            ValueError: If ``kind`` cannot be promoted to.
        """
        with self.lock:
            if self.state.pending_promotion is None:
                raise NoPendingPromotionError("no promotion pending")
            self.state.complete_promotion(kind)
            logger.info("promotion", extra={"piece": kind.value})
            self._after_human_move()

    def on_new_game(self) -> None:
        with self.lock:
            self._reset(GameState.new())
            logger.info("new game", extra={"human_side": self.human_side.value})

    def load_position(self, fen: str) -> None:
        """Replace the game with the position encoded in ``fen``.

        Raises:
            ValueError: If ``fen`` is invalid.
        """
        state = GameState.from_fen(fen)
        with self.lock:
            self._reset(state)
            logger.info("position loaded", extra={"fen": fen})

    # ---- Opponent ----
    @property
    def opponent_pending(self) -> bool:
        return self._opponent_pending

    def play_opponent_move(self, generation: Optional[int] = None) -> Optional[Move]:
        """Let the pet move if it is its turn.

        Args:
            generation (Optional[int]): Generation captured when the callback
                was scheduled; a mismatch means the game was replaced.

        Returns:
            Optional[Move]: The move played, or ``None`` if nothing happened.
        """
        with self.lock:
            if generation is not None and generation != self._gen:
                return None
            self._opponent_pending = False
            st = self.state
            if st.side_to_move is not self.opponent_side or st.locked:
                return None
            move = self.opponent.choose_move(st)
            if move is None:
                st.evaluate_terminal()
                return None
            promotion = move.promotion
            if promotion is None and st.is_promotion(move.from_sq, move.to_sq):
                promotion = Kind.QUEEN
            st.apply_move(move.from_sq, move.to_sq, promotion, side=self.opponent_side)
            logger.info("opponent move", extra={"move": move.to_uci()})
            self._log_if_over()
            return move

    # ---- Output to the rendering layer ----
    def get_board(self) -> Board:
        with self.lock:
            return self.state.board.copy()

    def get_legal_destinations(self, square: int) -> Set[int]:
        """Move hints for the player's piece on ``square``."""
        with self.lock:
            st = self.state
            if st.side_to_move is not self.human_side:
                return set()
            if not st.board.holds(square, self.human_side):
                return set()
            return st.legal_destinations(square)

    def get_status_text(self) -> str:
        with self.lock:
            st = self.state
            pet = self.settings.pet_name
            if st.pending_promotion is not None:
                return "Choose a piece to promote your pawn"
            if st.is_over:
                human_won = st.winner is self.human_side
                if st.outcome is Outcome.CHECKMATE:
                    return f"{pet} is checkmated. You win!" if human_won else f"Checkmate! {pet} wins!"
                if st.outcome is Outcome.KING_CAPTURED:
                    if human_won:
                        return f"Checkmate (capture)! {pet} resigns. You win!"
                    return f"Checkmate (capture)! {pet} wins!"
                return "Stalemate. It's a draw."
            if st.side_to_move is self.human_side:
                if st.check:
                    return "You are in check!"
                return f"Your turn ({self.human_side.label})"
            if st.check:
                return f"{pet} is in check!"
            return f"{pet} is thinking…"

    # ---- Internals ----
    def _play_human(self, from_sq: int, to_sq: int, promotion: Optional[Kind]) -> MoveStatus:
        status = self.state.apply_move(from_sq, to_sq, promotion, side=self.human_side)
        logger.info(
            "player move",
            extra={"move": Move(from_sq, to_sq, promotion).to_uci(), "status": status.value},
        )
        if status is MoveStatus.AWAITING:
            return status
        self._after_human_move()
        return status

    def _after_human_move(self) -> None:
        self._log_if_over()
        self._maybe_schedule_opponent()

    def _maybe_schedule_opponent(self) -> None:
        if self.state.side_to_move is not self.opponent_side or self._opponent_pending:
            return
        self._opponent_pending = True
        gen = self._gen
        delay_s = self.settings.opponent_delay_ms / 1000.0
        self.scheduler(delay_s, lambda: self.play_opponent_move(gen))

    def _reset(self, state: GameState) -> None:
        self._gen += 1
        self._opponent_pending = False
        self.state = state
        self._maybe_schedule_opponent()

    def _log_if_over(self) -> None:
        st = self.state
        if st.is_over:
            logger.info(
                "game over",
                extra={
                    "outcome": st.outcome.value if st.outcome else None,
                    "winner": st.winner.value if st.winner else None,
                },
            )
