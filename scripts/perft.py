#!/usr/bin/env python3
# ruff: noqa: E402
from __future__ import annotations

import argparse
import time
import os
import sys
from typing import List, Optional

# Allow running this script directly via `python scripts/perft.py`
# by adding the repo's src/ (which contains `pawchess/`) to sys.path.
SRC_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from pawchess.engine.board import STARTPOS_FEN
from pawchess.engine.game import GameState
from pawchess.engine.perft import perft
from pawchess.engine.piece import PROMOTION_KINDS, Kind


def main() -> None:
    parser = argparse.ArgumentParser(description="Run perft on a given FEN and depth")
    parser.add_argument(
        "--fen", type=str, default=STARTPOS_FEN, help="FEN string (default: startpos)"
    )
    parser.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    parser.add_argument(
        "--divide", action="store_true", help="Print per-root-move node counts"
    )
    args = parser.parse_args()

    state = GameState.from_fen(args.fen)
    start = time.perf_counter()
    if args.divide and args.depth > 0:
        nodes = 0
        for m in state.legal_moves():
            promo_kinds: List[Optional[Kind]] = [None]
            if state.is_promotion(m.from_sq, m.to_sq):
                promo_kinds = list(PROMOTION_KINDS)
            for kind in promo_kinds:
                child = state.copy()
                child.apply_move(m.from_sq, m.to_sq, kind, validate=False, evaluate=False)
                n = perft(child, args.depth - 1)
                label = m.to_uci() + (kind.value if kind else "")
                print(f"{label}: {n}")
                nodes += n
    else:
        nodes = perft(state, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")


if __name__ == "__main__":
    main()
