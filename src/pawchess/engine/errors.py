from __future__ import annotations


class IllegalMoveError(ValueError):
    """Move is not legal in the current state (or the state accepts no moves)."""


class NoPendingPromotionError(ValueError):
    """A promotion choice arrived while no pawn is waiting to be promoted."""


class TurnError(RuntimeError):
    """Input arrived while it is not the human's turn or input is locked."""
