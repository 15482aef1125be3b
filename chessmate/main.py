"""Game wrapper: the live position, side to move, move history and undo."""

import logging
from typing import List, Optional, Tuple

from chessmate.core.attacks import is_in_check
from chessmate.core.board import Position, Side
from chessmate.core.movegen import generate_legal_moves
from chessmate.core.moves import Move, apply_move
from chessmate.core.search import SearchEngine
from chessmate.core.utils import parse_move, render_board

logger = logging.getLogger(__name__)


class Engine:
    def __init__(self, depth: Optional[int] = None):
        self.position = Position.initial()
        self.turn = Side.WHITE
        self.search = SearchEngine(depth=depth)
        self.move_history: List[str] = []
        self._undo_stack = []

    def reset(self):
        """Reset to the initial position."""
        self.position = Position.initial()
        self.turn = Side.WHITE
        self.move_history.clear()
        self._undo_stack.clear()

    def legal_moves(self) -> List[Move]:
        return generate_legal_moves(self.position, self.turn)

    def get_legal_moves(self) -> List[str]:
        """Return legal moves in coordinate notation."""
        return [str(m) for m in self.legal_moves()]

    def resolve_move(self, move_str: str) -> Optional[Move]:
        """
        Match user input against the legal moves, or None if it is not one.

        A promotion may name any of Q/R/B/N; without a suffix it queens.
        """
        try:
            requested = parse_move(move_str)
        except ValueError:
            return None
        for legal in self.legal_moves():
            if not legal.same_squares(requested):
                continue
            if legal.promotion is None:
                return legal if requested.promotion is None else None
            return Move(*legal.src, *legal.dst, requested.promotion or legal.promotion)
        return None

    def push(self, move: Move):
        """Apply an already validated move for the side to move."""
        self._undo_stack.append((self.position.snapshot(), self.turn))
        apply_move(self.position, move)
        self.move_history.append(str(move))
        logger.debug("%s plays %s", self.turn, move)
        self.turn = self.turn.opponent

    def make_move(self, move_str: str) -> bool:
        """Play a move in coordinate notation (e.g. 'e2e4'). Returns True if legal."""
        move = self.resolve_move(move_str)
        if move is None:
            return False
        self.push(move)
        return True

    def undo_move(self):
        """Take back the last move."""
        if self._undo_stack:
            snapshot, self.turn = self._undo_stack.pop()
            self.position.restore(snapshot)
            self.move_history.pop()

    def get_best_move(self, depth: Optional[int] = None) -> Tuple[str, int]:
        move, value = self.search.search_best_move(self.position, self.turn, depth)
        return str(move), value

    def play_best_move(self, depth: Optional[int] = None) -> str:
        move, _ = self.search.search_best_move(self.position, self.turn, depth)
        self.push(move)
        return str(move)

    def in_check(self) -> bool:
        return is_in_check(self.position, self.turn)

    def status(self) -> str:
        """'checkmate', 'stalemate' or 'ongoing' for the side to move."""
        if self.legal_moves():
            return "ongoing"
        result = "checkmate" if self.in_check() else "stalemate"
        logger.info("%s: %s to move", result, self.turn)
        return result

    def is_game_over(self) -> bool:
        return self.status() != "ongoing"

    def winner(self) -> Optional[Side]:
        if self.status() == "checkmate":
            return self.turn.opponent
        return None

    def render(self) -> str:
        return render_board(self.position)
