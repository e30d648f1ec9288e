from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .piece import Kind, parse_promotion


@dataclass(frozen=True)
class Move:
    """Engine-internal move representation.

    Attributes:
        from_sq (int): Origin square index (0 = a8, 63 = h1).
        to_sq (int): Destination square index.
        promotion (Optional[Kind]): Promotion piece kind, if any.
    """

    from_sq: int
    to_sq: int
    promotion: Optional[Kind] = None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promotion.value if self.promotion else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo


def parse_uci(uci: str) -> Move:
    """Parse a long algebraic move string.

    Args:
        uci (str): Move such as ``"e2e4"`` or ``"a7a8n"``.

    Returns:
        Move: Parsed move.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if len(uci) not in (4, 5):
        raise ValueError(f"invalid move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[Kind] = None
    if len(uci) == 5:
        promo = parse_promotion(uci[4])
    return Move(from_sq, to_sq, promo)


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Square index; row 0 holds rank 8.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if len(s) != 2 or s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    row = 8 - int(s[1])
    return row * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a square index into algebraic notation.

    Raises:
        ValueError: If ``idx`` is outside 0..63.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    row = idx // 8
    return chr(ord("a") + file) + str(8 - row)
