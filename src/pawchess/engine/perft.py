from __future__ import annotations

from .game import GameState
from .piece import PROMOTION_KINDS


def perft(state: GameState, depth: int) -> int:
    """Compute perft node count for ``state`` at ``depth``.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).

    Each promotion counts once per promotion piece, matching published
    perft tables. Children are built by copy-apply; ``state`` is untouched.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1

    nodes = 0
    for m in state.legal_moves():
        if state.is_promotion(m.from_sq, m.to_sq):
            if depth == 1:
                nodes += len(PROMOTION_KINDS)
                continue
            for kind in PROMOTION_KINDS:
                child = state.copy()
                child.apply_move(m.from_sq, m.to_sq, kind, validate=False, evaluate=False)
                nodes += perft(child, depth - 1)
            continue
        if depth == 1:
            nodes += 1
            continue
        child = state.copy()
        child.apply_move(m.from_sq, m.to_sq, validate=False, evaluate=False)
        nodes += perft(child, depth - 1)
    return nodes
