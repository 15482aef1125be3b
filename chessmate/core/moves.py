"""
Move value type and the move applier.

apply_move recognises four move shapes, checked in this order:
castling (king moving two columns), en passant (pawn moving diagonally onto
an empty square), then normal moves, captures and promotions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .board import Position, Side, EMPTY, side_of, piece_for

PROMOTION_KINDS = "QRBN"


@dataclass(frozen=True)
class Move:
    src_row: int
    src_col: int
    dst_row: int
    dst_col: int
    promotion: Optional[str] = None  # upper-case kind letter, e.g. "Q"

    def __post_init__(self):
        if self.promotion is not None:
            kind = self.promotion.upper()
            if kind not in PROMOTION_KINDS:
                raise ValueError(f"invalid promotion piece: {self.promotion!r}")
            object.__setattr__(self, "promotion", kind)

    @property
    def src(self):
        return self.src_row, self.src_col

    @property
    def dst(self):
        return self.dst_row, self.dst_col

    def same_squares(self, other: Move) -> bool:
        return self.src == other.src and self.dst == other.dst

    def __str__(self) -> str:
        from .utils import move_to_str
        return move_to_str(self)


def apply_move(position: Position, move: Move) -> None:
    """Apply `move` to `position` in place. The move is assumed pseudo-legal."""
    board = position.board
    # The target lives for exactly one move; only a double pawn push below re-arms it.
    position.en_passant = None

    piece = board[move.src_row][move.src_col]
    mover = side_of(piece)
    kind = piece.lower()

    # Castling
    if kind == "k" and abs(move.dst_col - move.src_col) == 2:
        board[move.src_row][move.src_col] = EMPTY
        board[move.dst_row][move.dst_col] = piece
        kingside = move.dst_col > move.src_col
        if kingside:
            board[move.src_row][7] = EMPTY
            board[move.src_row][move.dst_col - 1] = piece_for("r", mover)
        else:
            board[move.src_row][0] = EMPTY
            board[move.src_row][move.dst_col + 1] = piece_for("r", mover)
        position.mark_king_moved(mover)
        position.mark_rook_moved(mover, kingside)
        return

    # En passant
    if kind == "p" and abs(move.dst_col - move.src_col) == 1 and board[move.dst_row][move.dst_col] == EMPTY:
        board[move.src_row][move.src_col] = EMPTY
        board[move.dst_row][move.dst_col] = piece
        captured_row = move.dst_row + 1 if mover is Side.WHITE else move.dst_row - 1
        board[captured_row][move.dst_col] = EMPTY
        return

    board[move.src_row][move.src_col] = EMPTY
    if move.promotion:
        piece = piece_for(move.promotion, mover)
    board[move.dst_row][move.dst_col] = piece

    if kind == "k":
        position.mark_king_moved(mover)
    elif kind == "r":
        # Rights are tied to the corner the rook started from.
        if move.src_row == mover.home_row and move.src_col == 0:
            position.mark_rook_moved(mover, kingside=False)
        elif move.src_row == mover.home_row and move.src_col == 7:
            position.mark_rook_moved(mover, kingside=True)
    elif kind == "p" and abs(move.dst_row - move.src_row) == 2:
        position.en_passant = ((move.src_row + move.dst_row) // 2, move.src_col)
