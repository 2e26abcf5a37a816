import logging
from dataclasses import dataclass, field

import matplotlib.pyplot as plt
import torch

from tile2048.config import DEFAULT_SETTINGS, Settings
from tile2048.vec_game import VectorizedGame

logger = logging.getLogger(__name__)


@dataclass
class GameRecord:
    won: bool
    moves: int


@dataclass
class SimulationResult:
    records: list[GameRecord] = field(default_factory=list)

    @property
    def wins(self) -> int:
        return sum(1 for r in self.records if r.won)

    @property
    def losses(self) -> int:
        return sum(1 for r in self.records if not r.won)

    @property
    def mean_moves(self) -> float:
        if not self.records:
            return 0.0
        return sum(r.moves for r in self.records) / len(self.records)


def simulate(
    num_games: int,
    num_envs: int = 64,
    device: torch.device | None = None,
    seed: int | None = None,
    settings: Settings = DEFAULT_SETTINGS,
) -> SimulationResult:
    """
    Play `num_games` games with a uniformly random choice among the moves that
    change the board, `num_envs` boards at a time.
    """
    if num_games < 1:
        raise ValueError(f"num_games must be positive, got {num_games}")
    if num_envs < 1:
        raise ValueError(f"num_envs must be positive, got {num_envs}")

    device = device or torch.device("cpu")
    generator = torch.Generator(device=device)
    if seed is not None:
        generator.manual_seed(seed)
    else:
        generator.seed()

    vec_game = VectorizedGame(num_envs, device, settings, generator)
    moves = torch.zeros(num_envs, dtype=torch.int64, device=device)
    result = SimulationResult()

    while len(result.records) < num_games:
        all_next_states = vec_game.get_moves()
        valid_actions = vec_game.get_valid_actions(all_next_states)

        # avoid an all-zero row in multinomial
        valid_actions[valid_actions.sum(dim=1) == 0] = 1.0

        actions = torch.multinomial(valid_actions, 1, generator=generator).squeeze(1)
        _, wins, losses = vec_game.step(actions, all_next_states)
        moves += 1

        done_indices = torch.nonzero(wins | losses).squeeze(-1)
        for idx in done_indices.tolist():
            result.records.append(GameRecord(bool(wins[idx]), int(moves[idx])))
            moves[idx] = 0

        if len(done_indices) > 0:
            logger.debug("%d games finished", len(result.records))

    del result.records[num_games:]
    logger.info(
        "simulated %d games: %d wins, %d losses",
        num_games,
        result.wins,
        result.losses,
    )
    return result


def plot_tallies(result: SimulationResult, path: str):
    """Save cumulative win and loss tallies against games played."""
    wins, losses = [], []
    won = lost = 0
    for record in result.records:
        if record.won:
            won += 1
        else:
            lost += 1
        wins.append(won)
        losses.append(lost)

    games = range(1, len(result.records) + 1)
    fig, (ax_tally, ax_moves) = plt.subplots(1, 2, figsize=(10, 4))

    ax_tally.plot(games, wins, label="wins", color="#2ca02c")
    ax_tally.plot(games, losses, label="losses", color="#d62728")
    ax_tally.set_xlabel("Games")
    ax_tally.set_ylabel("Count")
    ax_tally.legend()

    ax_moves.hist([r.moves for r in result.records], bins=20, color="#1f77b4")
    ax_moves.set_title("Moves per game")
    ax_moves.set_xlabel("moves")
    ax_moves.set_ylabel("count")

    fig.tight_layout()
    fig.savefig(path)
    plt.close(fig)
