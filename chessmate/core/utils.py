"""Coordinate notation, board rendering and search info formatting."""

from .board import BOARD_DIM, Position, inside_board

FILES = "abcdefgh"


def square_name(row: int, col: int) -> str:
    """(6, 4) -> 'e2'. Rank 8 is row 0."""
    return f"{FILES[col]}{BOARD_DIM - row}"


def parse_square(text: str):
    """'e2' -> (6, 4). Raises ValueError for anything off the board."""
    if len(text) != 2 or not text[1].isdigit():
        raise ValueError(f"Invalid square: {text!r}")
    col = ord(text[0].lower()) - ord("a")
    row = BOARD_DIM - int(text[1])
    if not inside_board(row, col):
        raise ValueError(f"Square off the board: {text!r}")
    return row, col


def move_to_str(move) -> str:
    text = square_name(move.src_row, move.src_col) + square_name(move.dst_row, move.dst_col)
    if move.promotion:
        text += f"={move.promotion}"
    return text


def parse_move(text: str):
    """
    Parse coordinate notation into a Move.

    Accepts 'e2e4', 'e7e8=Q', 'e7e8=q' and 'e7e8q'. Raises ValueError on
    malformed input or off-board squares.
    """
    from .moves import Move

    text = text.strip()
    if len(text) < 4:
        raise ValueError(f"Invalid move format: {text!r}")
    src_row, src_col = parse_square(text[0:2])
    dst_row, dst_col = parse_square(text[2:4])
    suffix = text[4:]
    if suffix.startswith("="):
        suffix = suffix[1:]
    if len(suffix) > 1:
        raise ValueError(f"Invalid move format: {text!r}")
    return Move(src_row, src_col, dst_row, dst_col, suffix or None)


def render_board(position: Position) -> str:
    """Text diagram, rank 8 at the top, files labelled a..h."""
    lines = ["  " + " ".join(FILES)]
    for r, row in enumerate(position.board):
        lines.append(f"{BOARD_DIM - r} " + " ".join(row))
    return "\n".join(lines)


def format_info(depth, score, nodes, elapsed, best_move) -> str:
    nps = int(nodes / elapsed) if elapsed > 0 else 0
    best = str(best_move) if best_move else "-"
    return f"info depth {depth} score cp {score} nodes {nodes} nps {nps} time {int(elapsed * 1000)} bestmove {best}"
