"""Interactive human-vs-engine game in the terminal."""

import argparse
import logging
import sys

from chessmate.config import CONFIG
from chessmate.core.board import Side
from chessmate.core.utils import parse_move
from chessmate.main import Engine


def game_over_message(engine: Engine):
    status = engine.status()
    if status == "checkmate":
        loser = str(engine.turn).capitalize()
        winner = str(engine.turn.opponent).capitalize()
        return f"{loser} is checkmated. {winner} wins!"
    if status == "stalemate":
        return "Stalemate!"
    return None


def play(engine: Engine, human_side: Side, input_fn=None, output=print) -> str:
    """Run the game loop until checkmate, stalemate or 'quit'. Returns the final message."""
    input_fn = input_fn or input
    while True:
        output(engine.render())
        message = game_over_message(engine)
        if message:
            output(message)
            return message

        if engine.turn is human_side:
            try:
                user_move = input_fn("Enter your move (e.g., e2e4): ").strip()
            except EOFError:
                return "Game aborted."
            if user_move in ("quit", "exit"):
                return "Game aborted."
            if user_move == "undo":
                # take back the engine's reply too
                engine.undo_move()
                engine.undo_move()
                continue
            try:
                parse_move(user_move)
            except ValueError:
                output("Invalid move format.")
                continue
            if not engine.make_move(user_move):
                output("Illegal move. Try again.")
                continue
        else:
            move = engine.play_best_move()
            output(f"AI plays: {move}")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Play chess against the engine")
    parser.add_argument("--depth", type=int, default=CONFIG.search.depth, help="Search depth in plies")
    parser.add_argument("--side", choices=["white", "black"], default=CONFIG.ui.human_side,
                        help="Side played by the human")
    parser.add_argument("--log-level", default=CONFIG.log_level, help="Logging level")
    args = parser.parse_args(argv)

    if args.depth < 1:
        parser.error("--depth must be at least 1")

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    engine = Engine(depth=args.depth)
    human = Side.WHITE if args.side == "white" else Side.BLACK
    play(engine, human)
    print("Game Over")
    return 0


if __name__ == "__main__":
    sys.exit(main())
