from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple

from .piece import Side


@dataclass(frozen=True)
class CastlingRights:
    """Per-corner castling eligibility. Rights are only ever revoked."""

    white_kingside: bool = True
    white_queenside: bool = True
    black_kingside: bool = True
    black_queenside: bool = True

    @classmethod
    def none(cls) -> "CastlingRights":
        return cls(False, False, False, False)

    @classmethod
    def from_fen(cls, field: str) -> "CastlingRights":
        """Parse the FEN castling field (``"KQkq"``, ``"-"``, ...).

        Raises:
            ValueError: On characters other than ``KQkq``.
        """
        if field == "-":
            return cls.none()
        for ch in field:
            if ch not in "KQkq":
                raise ValueError("invalid castling rights")
        return cls("K" in field, "Q" in field, "k" in field, "q" in field)

    def to_fen(self) -> str:
        out = "".join(
            ch
            for ch, flag in (
                ("K", self.white_kingside),
                ("Q", self.white_queenside),
                ("k", self.black_kingside),
                ("q", self.black_queenside),
            )
            if flag
        )
        return out or "-"

    def allows(self, route: "CastleRoute") -> bool:
        return bool(getattr(self, route.flag))

    def revoke(self, *flags: str) -> "CastlingRights":
        return replace(self, **{f: False for f in flags})


@dataclass(frozen=True)
class CastleRoute:
    """Geometry of one castling move.

    Attributes:
        side (Side): Castling side.
        flag (str): Name of the ``CastlingRights`` field guarding the route.
        king_from (int): King home square.
        king_to (int): King destination (two files away).
        rook_from (int): Rook home square.
        rook_to (int): Rook destination (the square the king passes over).
        between (Tuple[int, ...]): Squares that must be empty.
        king_path (Tuple[int, ...]): Start, transit and destination squares of
            the king; none may be attacked.
    """

    side: Side
    flag: str
    king_from: int
    king_to: int
    rook_from: int
    rook_to: int
    between: Tuple[int, ...]
    king_path: Tuple[int, ...]


ROUTES: Tuple[CastleRoute, ...] = (
    # White: e1=60, rooks a1=56 / h1=63
    CastleRoute(Side.WHITE, "white_kingside", 60, 62, 63, 61, (61, 62), (60, 61, 62)),
    CastleRoute(Side.WHITE, "white_queenside", 60, 58, 56, 59, (59, 58, 57), (60, 59, 58)),
    # Black: e8=4, rooks a8=0 / h8=7
    CastleRoute(Side.BLACK, "black_kingside", 4, 6, 7, 5, (5, 6), (4, 5, 6)),
    CastleRoute(Side.BLACK, "black_queenside", 4, 2, 0, 3, (3, 2, 1), (4, 3, 2)),
)

KING_HOME: Dict[Side, int] = {Side.WHITE: 60, Side.BLACK: 4}

# Rook home square -> right that dies when the rook leaves or is captured there
_ROOK_HOMES: Dict[int, str] = {r.rook_from: r.flag for r in ROUTES}


def route_for(side: Side, king_from: int, king_to: int) -> Optional[CastleRoute]:
    for route in ROUTES:
        if route.side is side and route.king_from == king_from and route.king_to == king_to:
            return route
    return None


def flag_for_rook_home(sq: int) -> Optional[str]:
    return _ROOK_HOMES.get(sq)
