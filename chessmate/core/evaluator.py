"""Material-only static evaluator."""

from chessmate.config import CONFIG
from .board import Position, EMPTY

KIND_NAMES = {
    "p": "PAWN",
    "n": "KNIGHT",
    "b": "BISHOP",
    "r": "ROOK",
    "q": "QUEEN",
    "k": "KING",
}


class MaterialEvaluator:
    def __init__(self, piece_values=None):
        values = piece_values or CONFIG.eval.piece_values
        self.values = {kind: values[name] for kind, name in KIND_NAMES.items()}

    def evaluate(self, position: Position) -> int:
        """Return material balance in centipawns, always from White's point of view."""
        score = 0
        for row in position.board:
            for piece in row:
                if piece == EMPTY:
                    continue
                value = self.values[piece.lower()]
                if piece.isupper():
                    score += value
                else:
                    score -= value
        return score
