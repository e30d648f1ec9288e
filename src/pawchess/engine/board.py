from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .piece import Kind, Piece, Side


STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
STARTPOS_PLACEMENT = STARTPOS_FEN.split()[0]

Cell = Optional[Piece]


def square_coords(sq: int) -> Tuple[int, int]:
    """Return ``(file, row)`` for a square index; row 0 is rank 8."""
    return sq % 8, sq // 8


def coords_to_square(file: int, row: int) -> int:
    return row * 8 + file


def on_board(file: int, row: int) -> bool:
    return 0 <= file < 8 and 0 <= row < 8


@dataclass
class Board:
    """64-cell mailbox board.

    Notes:
    - Index 0 is a8 (top-left from White's view), index 63 is h1.
    - Cells hold ``None`` for empty squares or a ``Piece``.
    - Only piece placement lives here; side to move, castling rights and the
      en-passant target belong to ``GameState``.
    """

    cells: List[Cell] = field(default_factory=lambda: [None] * 64)

    def __post_init__(self) -> None:
        if len(self.cells) != 64:
            raise ValueError("board must have 64 cells")

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board with the standard initial placement."""
        return cls.from_placement(STARTPOS_PLACEMENT)

    @classmethod
    def from_placement(cls, placement: str) -> "Board":
        """Create a board from the piece-placement field of a FEN string.

        Args:
            placement (str): Ranks 8..1 separated by ``/``.

        Returns:
            Board: Board with the encoded pieces.

        Raises:
            ValueError: If the placement has the wrong number of ranks, a rank
                does not sum to 8 squares, or contains an invalid symbol.
        """
        ranks = placement.split("/")
        if len(ranks) != 8:
            raise ValueError("FEN board must have 8 ranks")
        cells: List[Cell] = [None] * 64
        # FEN lists rank 8 first, which is row 0 here
        for row, rank in enumerate(ranks):
            file = 0
            for ch in rank:
                if ch.isdigit():
                    n = int(ch)
                    if n < 1 or n > 8:
                        raise ValueError("invalid empty count in FEN rank")
                    file += n
                else:
                    if file >= 8:
                        raise ValueError("too many squares in FEN rank")
                    cells[coords_to_square(file, row)] = Piece.from_char(ch)
                    file += 1
            if file != 8:
                raise ValueError("rank does not sum to 8 squares in FEN")
        return cls(cells)

    def to_placement(self) -> str:
        """Serialize the piece placement into its FEN field."""
        ranks: List[str] = []
        for row in range(8):
            run = 0
            out = []
            for file in range(8):
                piece = self.cells[coords_to_square(file, row)]
                if piece is None:
                    run += 1
                    continue
                if run:
                    out.append(str(run))
                    run = 0
                out.append(piece.char)
            if run:
                out.append(str(run))
            ranks.append("".join(out))
        return "/".join(ranks)

    def copy(self) -> "Board":
        return Board(list(self.cells))

    def __getitem__(self, sq: int) -> Cell:
        return self.cells[sq]

    def __setitem__(self, sq: int, piece: Cell) -> None:
        self.cells[sq] = piece

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def is_empty(self, sq: int) -> bool:
        return self.cells[sq] is None

    def holds(self, sq: int, side: Side) -> bool:
        piece = self.cells[sq]
        return piece is not None and piece.side is side

    def king_square(self, side: Side) -> Optional[int]:
        """Return the square of ``side``'s king, or ``None`` if it is gone."""
        king = Piece(Kind.KING, side)
        for sq, piece in enumerate(self.cells):
            if piece == king:
                return sq
        return None

    def squares_of(self, side: Side) -> List[int]:
        return [sq for sq, p in enumerate(self.cells) if p is not None and p.side is side]

    def piece_count(self) -> int:
        return sum(1 for p in self.cells if p is not None)

    def symbols(self) -> List[Optional[str]]:
        """Per-square FEN symbols (``None`` for empty) for display."""
        return [p.char if p is not None else None for p in self.cells]
