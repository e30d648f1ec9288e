from __future__ import annotations

import logging
import random
from typing import List, Optional

from ..engine.game import GameState
from ..engine.movegen import en_passant_victim
from ..engine.move import Move
from ..engine.piece import Kind


logger = logging.getLogger(__name__)


def is_capture(state: GameState, move: Move) -> bool:
    """Return True if ``move`` takes a piece, en passant included."""
    if state.board[move.to_sq] is not None:
        return True
    return en_passant_victim(state.board, move.from_sq, move.to_sq, state.ep_square) is not None


def choose_move(state: GameState, rng: Optional[random.Random] = None) -> Optional[Move]:
    """Pick a move for the side to move: any capture if possible, else any move.

    One-ply greedy policy with no lookahead. Pawn moves onto the far row
    promote to a queen.

    Args:
        state (GameState): Position to move in; not modified.
        rng (Optional[random.Random]): Source of randomness; the module RNG is
            used when omitted.

    Returns:
        Optional[Move]: Chosen move, or ``None`` when the game is over or the
            side to move has no legal move.
    """
    if state.is_over or state.locked:
        return None
    legal = state.legal_moves()
    if not legal:
        return None
    captures = [m for m in legal if is_capture(state, m)]
    pool: List[Move] = captures or legal
    pick = (rng or random).choice(pool)
    if state.is_promotion(pick.from_sq, pick.to_sq):
        pick = Move(pick.from_sq, pick.to_sq, Kind.QUEEN)
    logger.debug(
        "opponent choice",
        extra={"move": pick.to_uci(), "candidates": len(pool), "captures": len(captures)},
    )
    return pick


class RandomOpponent:
    """Capture-preferring random opponent with its own RNG.

    Seeding makes the opponent deterministic, which tests rely on.
    """

    def __init__(self, rng: Optional[random.Random] = None, *, seed: Optional[int] = None) -> None:
        self.rng = rng if rng is not None else random.Random(seed)

    def choose_move(self, state: GameState) -> Optional[Move]:
        return choose_move(state, self.rng)
