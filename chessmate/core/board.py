"""Position representation: 8x8 board plus castling flags and en-passant target."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

BOARD_DIM = 8
EMPTY = "."

WHITE_PIECES = "PNBRQK"
BLACK_PIECES = "pnbrqk"

# Row 0 is rank 8 (Black's back rank), row 7 is rank 1.
INITIAL_LAYOUT = (
    "rnbqkbnr",
    "pppppppp",
    "........",
    "........",
    "........",
    "........",
    "PPPPPPPP",
    "RNBQKBNR",
)

Square = Tuple[int, int]


class Side(Enum):
    WHITE = 0
    BLACK = 1

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.WHITE else Side.WHITE

    @property
    def home_row(self) -> int:
        """Back-rank row index for this side."""
        return 7 if self is Side.WHITE else 0

    def __str__(self) -> str:
        return self.name.lower()


def inside_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_DIM and 0 <= col < BOARD_DIM


def side_of(symbol: str) -> Optional[Side]:
    """Owner of a piece symbol, or None for an empty cell."""
    if symbol == EMPTY:
        return None
    return Side.WHITE if symbol.isupper() else Side.BLACK


def piece_for(kind: str, side: Side) -> str:
    """Colour a piece kind letter for `side` (upper case for White)."""
    return kind.upper() if side is Side.WHITE else kind.lower()


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of everything a move can change."""
    board: Tuple[Tuple[str, ...], ...]
    white_king_moved: bool
    white_qrook_moved: bool
    white_krook_moved: bool
    black_king_moved: bool
    black_qrook_moved: bool
    black_krook_moved: bool
    en_passant: Optional[Square]


@dataclass
class Position:
    """
    Board plus the auxiliary state that travels with it.

    Attributes:
        board: 8 rows of 8 cell symbols, EMPTY or one of PNBRQK / pnbrqk
        white_king_moved .. black_krook_moved: castling-rights flags
        en_passant: square skipped by the last two-square pawn advance, or None
    """
    board: List[List[str]] = field(default_factory=lambda: [[EMPTY] * BOARD_DIM for _ in range(BOARD_DIM)])
    white_king_moved: bool = False
    white_qrook_moved: bool = False
    white_krook_moved: bool = False
    black_king_moved: bool = False
    black_qrook_moved: bool = False
    black_krook_moved: bool = False
    en_passant: Optional[Square] = None

    @classmethod
    def initial(cls) -> Position:
        """Standard starting layout."""
        return cls(board=[list(row) for row in INITIAL_LAYOUT])

    @classmethod
    def from_rows(cls, rows, **flags) -> Position:
        """Build a position from 8 strings of 8 cell symbols (row 0 = rank 8)."""
        rows = list(rows)
        if len(rows) != BOARD_DIM or any(len(r) != BOARD_DIM for r in rows):
            raise ValueError("expected 8 rows of 8 cells")
        for r in rows:
            for ch in r:
                if ch != EMPTY and ch not in WHITE_PIECES + BLACK_PIECES:
                    raise ValueError(f"unknown cell symbol {ch!r}")
        return cls(board=[list(r) for r in rows], **flags)

    def piece_at(self, row: int, col: int) -> str:
        return self.board[row][col]

    def king_square(self, side: Side) -> Optional[Square]:
        """Linear scan for `side`'s king; None if it is not on the board."""
        king = piece_for("k", side)
        for r in range(BOARD_DIM):
            for c in range(BOARD_DIM):
                if self.board[r][c] == king:
                    return r, c
        return None

    def king_moved(self, side: Side) -> bool:
        return self.white_king_moved if side is Side.WHITE else self.black_king_moved

    def mark_king_moved(self, side: Side) -> None:
        if side is Side.WHITE:
            self.white_king_moved = True
        else:
            self.black_king_moved = True

    def rook_moved(self, side: Side, kingside: bool) -> bool:
        if side is Side.WHITE:
            return self.white_krook_moved if kingside else self.white_qrook_moved
        return self.black_krook_moved if kingside else self.black_qrook_moved

    def mark_rook_moved(self, side: Side, kingside: bool) -> None:
        if side is Side.WHITE:
            if kingside:
                self.white_krook_moved = True
            else:
                self.white_qrook_moved = True
        elif kingside:
            self.black_krook_moved = True
        else:
            self.black_qrook_moved = True

    def copy(self) -> Position:
        """Independent scratch copy, auxiliary state included."""
        return Position(
            board=[row[:] for row in self.board],
            white_king_moved=self.white_king_moved,
            white_qrook_moved=self.white_qrook_moved,
            white_krook_moved=self.white_krook_moved,
            black_king_moved=self.black_king_moved,
            black_qrook_moved=self.black_qrook_moved,
            black_krook_moved=self.black_krook_moved,
            en_passant=self.en_passant,
        )

    def snapshot(self) -> Snapshot:
        return Snapshot(
            board=tuple(tuple(row) for row in self.board),
            white_king_moved=self.white_king_moved,
            white_qrook_moved=self.white_qrook_moved,
            white_krook_moved=self.white_krook_moved,
            black_king_moved=self.black_king_moved,
            black_qrook_moved=self.black_qrook_moved,
            black_krook_moved=self.black_krook_moved,
            en_passant=self.en_passant,
        )

    def restore(self, snap: Snapshot) -> None:
        """Write a snapshot back in place (rows are reused, not replaced)."""
        for r, row in enumerate(snap.board):
            self.board[r][:] = row
        self.white_king_moved = snap.white_king_moved
        self.white_qrook_moved = snap.white_qrook_moved
        self.white_krook_moved = snap.white_krook_moved
        self.black_king_moved = snap.black_king_moved
        self.black_qrook_moved = snap.black_qrook_moved
        self.black_krook_moved = snap.black_krook_moved
        self.en_passant = snap.en_passant

    def pieces(self, side: Side):
        """Yield (row, col, symbol) for each of `side`'s pieces in row-major order."""
        for r in range(BOARD_DIM):
            for c in range(BOARD_DIM):
                symbol = self.board[r][c]
                if side_of(symbol) is side:
                    yield r, c, symbol
