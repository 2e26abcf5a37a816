import argparse
import logging
import random
import sys

from tile2048.config import Settings
from tile2048.game import new_session
from tile2048.play import play
from tile2048.terminal import keys, raw_terminal


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal (h/j/k/l or arrows, q to quit)")
    parser.add_argument("--seed", type=int, default=None, help="seed for tile spawns")
    parser.add_argument("--pause", type=float, default=0.4, help="seconds to show a finished board")
    parser.add_argument("--log-file", default=None, help="write game events to this file")
    args = parser.parse_args()

    # the terminal itself is taken by the board
    if args.log_file:
        logging.basicConfig(filename=args.log_file, level=logging.DEBUG)

    game = new_session(
        rng=random.Random(args.seed),
        settings=Settings(terminal_pause=args.pause),
    )

    with raw_terminal():
        play(game, keys(), sys.stdout)
