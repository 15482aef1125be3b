import logging
import time
from typing import Optional, Tuple

from chessmate.config import CONFIG
from .attacks import is_in_check
from .board import Position, Side
from .evaluator import MaterialEvaluator
from .movegen import generate_legal_moves
from .moves import Move, apply_move
from .utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000
MATE_SCORE = 20000


class NoLegalMovesError(ValueError):
    """Raised when a best move is requested for a side that has none."""


class SearchEngine:
    """
    Fixed-depth negamax with alpha-beta pruning over one shared position.

    Every move is applied to the caller's position and undone from a snapshot
    before the next sibling is tried, so the position is back to its entry
    value whenever a search call returns.
    """

    def __init__(self, evaluator: Optional[MaterialEvaluator] = None, depth: Optional[int] = None,
                 align_leaf_side: Optional[bool] = None):
        self.evaluator = evaluator or MaterialEvaluator()
        self.max_depth = depth if depth is not None else CONFIG.search.depth
        if self.max_depth < 1:
            raise ValueError(f"search depth must be >= 1, got {self.max_depth}")
        self.align_leaf_side = CONFIG.search.align_leaf_side if align_leaf_side is None else align_leaf_side
        self.nodes = 0
        self.last_score: Optional[int] = None

    def negamax(self, position: Position, depth: int, side: Side, alpha: int, beta: int) -> int:
        self.nodes += 1
        # Leaf scores stay White-relative; see DESIGN.md.
        if depth == 0:
            return self.evaluator.evaluate(position)

        moves = generate_legal_moves(position, side)
        if not moves:
            return -MATE_SCORE if is_in_check(position, side) else 0

        best_score = -INF
        for move in moves:
            saved = position.snapshot()
            apply_move(position, move)
            score = -self.negamax(position, depth - 1, side.opponent, -beta, -alpha)
            position.restore(saved)

            if score > best_score:
                best_score = score
            if best_score > alpha:
                alpha = best_score
            if alpha >= beta:
                break
        return best_score

    def leaf_aligned_depth(self, side: Side, depth: int) -> int:
        """
        Leaves are scored from White's side, so the ply above them has to be
        Black's for the negations to line up. With alignment on, a root depth
        of the wrong parity is lowered by one (raised to 2 from 1).
        """
        if not self.align_leaf_side or (depth % 2 == 0) == (side is Side.WHITE):
            return depth
        return depth - 1 if depth > 1 else depth + 1

    def search_best_move(self, position: Position, side: Side, depth: Optional[int] = None) -> Tuple[Move, int]:
        depth = depth if depth is not None else self.max_depth
        if depth < 1:
            raise ValueError(f"search depth must be >= 1, got {depth}")
        depth = self.leaf_aligned_depth(side, depth)
        moves = generate_legal_moves(position, side)
        if not moves:
            raise NoLegalMovesError(f"{side} has no legal moves")

        self.nodes = 0
        start_time = time.time()
        best_move = moves[0]
        best_score = -INF
        for move in moves:
            saved = position.snapshot()
            apply_move(position, move)
            # Full window per child: the root needs the move, not just a bound.
            score = -self.negamax(position, depth - 1, side.opponent, -INF, INF)
            position.restore(saved)
            if score > best_score:
                best_score = score
                best_move = move

        self.last_score = best_score
        logger.info(format_info(depth, best_score, self.nodes, time.time() - start_time, best_move))
        return best_move, best_score

    def choose_best_move(self, position: Position, side: Side, depth: Optional[int] = None) -> Move:
        move, _ = self.search_best_move(position, side, depth)
        return move
