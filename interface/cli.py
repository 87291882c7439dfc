"""Play a game against the engine in the terminal."""

import argparse
import logging

import chess

from duelchess.config import CONFIG
from duelchess.core.difficulty import Difficulty
from duelchess.errors import EngineError
from duelchess.game import Game


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="duelchess", description=__doc__)
    parser.add_argument("--difficulty", default=CONFIG.difficulty.default,
                        type=str.upper, choices=[d.value for d in Difficulty])
    parser.add_argument("--color", default="white", choices=["white", "black"],
                        help="side the human plays")
    parser.add_argument("--fen", default=None, help="start from this position")
    parser.add_argument("--seed", type=int, default=None, help="seed the engine's random picks")
    return parser


def run(game: Game, human: chess.Color, read=input, write=print) -> str:
    """Alternate human and engine moves until the game ends; returns the result."""
    while not game.is_over():
        write(game.board.board)
        write("----------------------------")

        if game.board.board.turn == human:
            user_move = read("Your move (SAN or UCI, 'undo', 'quit'): ").strip()
            if user_move == "quit":
                break
            if user_move == "undo":
                game.undo(2)
                continue
            try:
                game.play(user_move)
            except EngineError as e:
                write(f"Illegal move, try again. ({e})")
        else:
            san = game.ai_move()
            write(f"Engine plays: {san} | Eval: {game.evaluate()}")

    write("Game Over")
    write(f"Status: {game.status()}")
    write(f"Result: {game.result()}")
    return game.result()


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level)
    try:
        game = Game(args.difficulty, fen=args.fen, seed=args.seed)
    except EngineError as e:
        print(e)
        return 2
    human = chess.WHITE if args.color == "white" else chess.BLACK
    try:
        run(game, human)
    except (EOFError, KeyboardInterrupt):
        print()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
