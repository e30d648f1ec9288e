from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Side(str, Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @property
    def advance(self) -> int:
        """Row delta of a forward pawn step (row 0 is rank 8)."""
        return -1 if self is Side.WHITE else 1

    @property
    def pawn_row(self) -> int:
        return 6 if self is Side.WHITE else 1

    @property
    def last_row(self) -> int:
        return 0 if self is Side.WHITE else 7

    @property
    def label(self) -> str:
        return "White" if self is Side.WHITE else "Black"


class Kind(str, Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"


PROMOTION_KINDS = (Kind.QUEEN, Kind.ROOK, Kind.BISHOP, Kind.KNIGHT)


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    Attributes:
        kind (Kind): Piece type; drives movement rules.
        side (Side): Owning side.
    """

    kind: Kind
    side: Side

    @property
    def char(self) -> str:
        """FEN-style symbol, uppercase for White (e.g. ``"N"``, ``"q"``)."""
        c = self.kind.value
        return c.upper() if self.side is Side.WHITE else c

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        """Parse a FEN-style symbol.

        Raises:
            ValueError: If ``ch`` is not one of ``PNBRQKpnbrqk``.
        """
        if len(ch) != 1:
            raise ValueError(f"invalid piece symbol: {ch!r}")
        try:
            kind = Kind(ch.lower())
        except ValueError as e:
            raise ValueError(f"invalid piece symbol: {ch!r}") from e
        return cls(kind, Side.WHITE if ch.isupper() else Side.BLACK)


def parse_promotion(value: str) -> Kind:
    """Return the promotion kind for a symbol such as ``"q"`` or ``"N"``.

    Raises:
        ValueError: If ``value`` does not name a queen, rook, bishop or knight.
    """
    try:
        kind = Kind(value.lower())
    except ValueError as e:
        raise ValueError(f"invalid promotion piece: {value!r}") from e
    if kind not in PROMOTION_KINDS:
        raise ValueError(f"invalid promotion piece: {value!r}")
    return kind
