import argparse
import asyncio
import logging
from typing import List, Optional

from checkmate_ai.advisor import advisor_from_config
from checkmate_ai.config import CONFIG
from checkmate_ai.errors import IllegalMoveRequested
from checkmate_ai.game import Game
from checkmate_ai.main import ChessAI


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play chess against the computer.")
    parser.add_argument("--color", default=CONFIG.ui.default_player_color,
                        choices=["white", "black", "random"])
    parser.add_argument("--difficulty", default=CONFIG.ui.default_difficulty,
                        help="novice | intermediate | master (or easy | normal | hard)")
    parser.add_argument("--fen", default=None, help="start from this position")
    return parser.parse_args(argv)


async def play(game: Game, read=input, write=print) -> None:
    while not game.is_game_over():
        write(game.board)
        write("----------------------------")
        write(game.status_message())

        if game.is_player_turn:
            text = read("Your move (SAN or UCI, 'undo', 'quit'): ").strip()
            if text == "quit":
                break
            if text == "undo":
                if not game.undo():
                    write("Nothing to undo.")
                continue
            try:
                game.player_move(text)
            except IllegalMoveRequested as e:
                write(f"{e.message}, try again.")
        else:
            write(game.ai.get_status_message())
            record = await game.engine_move()
            if record is None:
                break
            write(f"Engine plays: {record.san}")

    write(game.board)
    write(game.status_message())
    write(f"Result: {game.board.result(claim_draw=True)}")


async def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=CONFIG.log_level)
    ai = ChessAI(args.difficulty, advisor=advisor_from_config(CONFIG), cfg=CONFIG)
    game = Game(player_color=args.color, difficulty=args.difficulty, ai=ai, fen=args.fen)
    try:
        await play(game)
    finally:
        await ai.aclose()


if __name__ == "__main__":
    asyncio.run(main())
