"""
Legal move generation.

Candidates are produced per piece in board-scan order, then each one is tried
on a scratch copy of the position and dropped if it leaves the mover's king
in check. Pins and discovered checks need no separate handling this way.
"""

from __future__ import annotations

from typing import Iterator, List

from .attacks import (
    KNIGHT_OFFSETS, ORTHOGONAL_DIRS, DIAGONAL_DIRS, KING_OFFSETS,
    is_square_attacked, is_in_check,
)
from .board import Position, Side, EMPTY, inside_board, side_of, piece_for
from .moves import Move, apply_move

SLIDER_DIRS = {
    "b": DIAGONAL_DIRS,
    "r": ORTHOGONAL_DIRS,
    "q": ORTHOGONAL_DIRS + DIAGONAL_DIRS,
}


def _pawn_moves(position: Position, row: int, col: int, side: Side) -> Iterator[Move]:
    board = position.board
    direction = -1 if side is Side.WHITE else 1
    start_row = 6 if side is Side.WHITE else 1
    promotion_row = 0 if side is Side.WHITE else 7
    next_row = row + direction
    if not inside_board(next_row, col):
        return
    promotion = "Q" if next_row == promotion_row else None

    if board[next_row][col] == EMPTY:
        yield Move(row, col, next_row, col, promotion)
        two_row = row + 2 * direction
        if row == start_row and board[two_row][col] == EMPTY:
            yield Move(row, col, two_row, col)

    for dc in (-1, 1):
        c = col + dc
        if inside_board(next_row, c) and side_of(board[next_row][c]) is side.opponent:
            yield Move(row, col, next_row, c, promotion)

    if position.en_passant is not None:
        ep_row, ep_col = position.en_passant
        if ep_row == next_row and abs(ep_col - col) == 1:
            yield Move(row, col, ep_row, ep_col, promotion)


def _step_moves(position: Position, row: int, col: int, side: Side, offsets) -> Iterator[Move]:
    for dr, dc in offsets:
        r, c = row + dr, col + dc
        if inside_board(r, c) and side_of(position.board[r][c]) is not side:
            yield Move(row, col, r, c)


def _slider_moves(position: Position, row: int, col: int, side: Side, dirs) -> Iterator[Move]:
    for dr, dc in dirs:
        r, c = row + dr, col + dc
        while inside_board(r, c):
            owner = side_of(position.board[r][c])
            if owner is None:
                yield Move(row, col, r, c)
            else:
                if owner is not side:
                    yield Move(row, col, r, c)
                break
            r += dr
            c += dc


def _castling_moves(position: Position, row: int, col: int, side: Side) -> Iterator[Move]:
    home = side.home_row
    if row != home or col != 4 or position.king_moved(side):
        return
    board = position.board
    rook = piece_for("r", side)
    enemy = side.opponent

    # Kingside: f and g empty; e, f, g not attacked.
    if (not position.rook_moved(side, kingside=True) and board[home][7] == rook
            and board[home][5] == EMPTY and board[home][6] == EMPTY
            and not any(is_square_attacked(position, home, c, enemy) for c in (4, 5, 6))):
        yield Move(home, 4, home, 6)

    # Queenside: b, c and d empty; only e, d, c must be safe.
    if (not position.rook_moved(side, kingside=False) and board[home][0] == rook
            and all(board[home][c] == EMPTY for c in (1, 2, 3))
            and not any(is_square_attacked(position, home, c, enemy) for c in (4, 3, 2))):
        yield Move(home, 4, home, 2)


def generate_pseudo_legal_moves(position: Position, side: Side) -> Iterator[Move]:
    """Yield moves that obey piece movement rules, ignoring own-king safety."""
    for row, col, symbol in position.pieces(side):
        kind = symbol.lower()
        if kind == "p":
            yield from _pawn_moves(position, row, col, side)
        elif kind == "n":
            yield from _step_moves(position, row, col, side, KNIGHT_OFFSETS)
        elif kind in SLIDER_DIRS:
            yield from _slider_moves(position, row, col, side, SLIDER_DIRS[kind])
        elif kind == "k":
            yield from _step_moves(position, row, col, side, KING_OFFSETS)
            yield from _castling_moves(position, row, col, side)


def leaves_king_safe(position: Position, move: Move, side: Side) -> bool:
    """Try `move` on a throwaway copy and report whether `side` is out of check."""
    scratch = position.copy()
    apply_move(scratch, move)
    return not is_in_check(scratch, side)


def generate_legal_moves(position: Position, side: Side) -> List[Move]:
    """
    All legal moves for `side`.

    An empty list is a terminal position: checkmate if `side` is in check,
    stalemate otherwise.
    """
    return [
        move for move in generate_pseudo_legal_moves(position, side)
        if leaves_king_safe(position, move, side)
    ]


def is_legal_move(position: Position, side: Side, move: Move) -> bool:
    return move in generate_legal_moves(position, side)
