"""Core engine components: position, attacks, move generation, evaluator and search."""

from .board import Position, Side, Snapshot
from .moves import Move, apply_move
from .attacks import is_square_attacked, is_in_check
from .movegen import generate_legal_moves
from .evaluator import MaterialEvaluator
from .search import SearchEngine, NoLegalMovesError
