"""Attack detection. Never consults move legality, only raw piece reach."""

from .board import Position, Side, EMPTY, inside_board, piece_for

KNIGHT_OFFSETS = (
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
)
ORTHOGONAL_DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))
DIAGONAL_DIRS = ((1, 1), (1, -1), (-1, 1), (-1, -1))
KING_OFFSETS = tuple(
    (dr, dc) for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)
)


def _first_blocker(position: Position, row: int, col: int, dr: int, dc: int) -> str:
    r, c = row + dr, col + dc
    while inside_board(r, c):
        piece = position.board[r][c]
        if piece != EMPTY:
            return piece
        r += dr
        c += dc
    return EMPTY


def is_square_attacked(position: Position, row: int, col: int, by_side: Side) -> bool:
    """True if any piece of `by_side` could capture on (row, col) in one step."""
    board = position.board

    # Pawns attack diagonally forward: a White pawn sits one row below its target.
    pawn = piece_for("p", by_side)
    pawn_row = row + 1 if by_side is Side.WHITE else row - 1
    for dc in (-1, 1):
        if inside_board(pawn_row, col + dc) and board[pawn_row][col + dc] == pawn:
            return True

    knight = piece_for("n", by_side)
    for dr, dc in KNIGHT_OFFSETS:
        r, c = row + dr, col + dc
        if inside_board(r, c) and board[r][c] == knight:
            return True

    queen = piece_for("q", by_side)
    rook = piece_for("r", by_side)
    for dr, dc in ORTHOGONAL_DIRS:
        if _first_blocker(position, row, col, dr, dc) in (rook, queen):
            return True

    bishop = piece_for("b", by_side)
    for dr, dc in DIAGONAL_DIRS:
        if _first_blocker(position, row, col, dr, dc) in (bishop, queen):
            return True

    king = piece_for("k", by_side)
    for dr, dc in KING_OFFSETS:
        r, c = row + dr, col + dc
        if inside_board(r, c) and board[r][c] == king:
            return True

    return False


def is_in_check(position: Position, side: Side) -> bool:
    """
    True if `side`'s king is attacked.

    A side with no king on the board is reported as in check, so callers treat
    the position as lost instead of failing.
    """
    square = position.king_square(side)
    if square is None:
        return True
    return is_square_attacked(position, square[0], square[1], side.opponent)
