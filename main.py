import argparse
import logging

import torch

from tile2048.simulate import plot_tallies, simulate


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Play random 2048 games in batches and tally the outcomes")
    parser.add_argument("--games", type=int, default=256)
    parser.add_argument("--envs", type=int, default=64)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--device", default="cpu")
    parser.add_argument("--plot", default=None, help="save a chart of the tallies to this path")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    device = torch.device(args.device)
    print(f"Using device: {device}")

    result = simulate(args.games, args.envs, device, args.seed)

    print(f"games: {len(result.records)}")
    print(f"wins: {result.wins}")
    print(f"losses: {result.losses}")
    print(f"moves per game: {result.mean_moves:.1f}")

    if args.plot:
        plot_tallies(result, args.plot)
        print(f"saved plot to {args.plot}")
