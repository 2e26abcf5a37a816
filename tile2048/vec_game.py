import torch

from tile2048.config import DEFAULT_SETTINGS, Settings
from tile2048.game import Direction

# action index -> direction, shared by get_moves and step
DIRECTIONS = (Direction.LEFT, Direction.RIGHT, Direction.UP, Direction.DOWN)


class VectorizedGame:
    """
    Many boards stepped together. A move resolves like Game.move: loss when
    the board is full, then win on the winning tile, then a spawn whenever
    the board changed. There is no pause between games.
    """

    def __init__(
        self,
        num_envs: int,
        device: torch.device,
        settings: Settings = DEFAULT_SETTINGS,
        generator: torch.Generator | None = None,
    ):
        self.num_envs = num_envs
        self.device = device
        self.settings = settings
        self.generator = generator
        self.board = torch.zeros((num_envs, 4, 4), dtype=torch.int64, device=device)
        self.win_count = torch.zeros(num_envs, dtype=torch.int64, device=device)
        self.loss_count = torch.zeros(num_envs, dtype=torch.int64, device=device)
        self.reset()

    def reset(self, env_indices=None):
        """Clear boards and give each one tile, the same start a finished game gets."""
        if env_indices is None:
            env_indices = torch.arange(self.num_envs, device=self.device)

        if len(env_indices) > 0:
            self.board[env_indices] = 0
            self.add_random_tile(env_indices)

    def add_random_tile(self, env_indices):
        # env_indices: (K,), every selected board has at least one empty cell
        if len(env_indices) == 0:
            return

        boards = self.board[env_indices]  # (K, 4, 4)
        flat_boards = boards.view(-1, 16)
        empty_mask = (flat_boards == 0).float()
        assert bool((empty_mask.sum(dim=1) > 0).all())

        # uniform over the empty cells of each board
        flat_indices = torch.multinomial(
            empty_mask, 1, generator=self.generator
        ).squeeze(-1)  # (K,)

        four = torch.full(
            (len(env_indices),), self.settings.four_probability, device=self.device
        )
        vals = (torch.bernoulli(four, generator=self.generator) * 2 + 2).to(
            self.board.dtype
        )

        update_mask = torch.nn.functional.one_hot(flat_indices, 16).bool()
        flat_boards[update_mask] = vals
        self.board[env_indices] = flat_boards.view(-1, 4, 4)

    def get_moves(self):
        """
        Returns a tensor of shape (N, 4, 4, 4): the next board for each action,
        in DIRECTIONS order, before any spawn.
        """
        moves = []

        moves.append(self._move_left_batch(self.board.clone()))

        # Right: rotate twice, move left, rotate back
        b_right = torch.rot90(self.board, 2, [1, 2])
        b_right = self._move_left_batch(b_right)
        moves.append(torch.rot90(b_right, -2, [1, 2]))

        # Up: one counter-clockwise turn brings the top row to the left
        b_up = torch.rot90(self.board, 1, [1, 2])
        b_up = self._move_left_batch(b_up)
        moves.append(torch.rot90(b_up, -1, [1, 2]))

        # Down: one clockwise turn brings the bottom row to the left
        b_down = torch.rot90(self.board, -1, [1, 2])
        b_down = self._move_left_batch(b_down)
        moves.append(torch.rot90(b_down, 1, [1, 2]))

        return torch.stack(moves, dim=1)

    def _shift_left(self, x):
        # x: (M, 4)
        mask = x != 0
        # stable sort descending puts True (non-zeros) first, preserving order
        _, indices = torch.sort(mask.int(), dim=1, descending=True, stable=True)
        return torch.gather(x, 1, indices)

    def _move_left_batch(self, board):
        # board: (N, 4, 4)
        x = board.reshape(-1, 4)
        x = self._shift_left(x)

        # pairs left to right; a zeroed partner cannot match again
        for j in range(3):
            pair = (x[:, j] == x[:, j + 1]) & (x[:, j] != 0)
            x[pair, j] *= 2
            x[pair, j + 1] = 0

        x = self._shift_left(x)
        return x.view(-1, 4, 4)

    def step(self, actions, all_next_states=None):
        """
        Apply one action per board. Returns (changed, wins, losses), boolean
        tensors of shape (N,).
        """
        if all_next_states is None:
            all_next_states = self.get_moves()  # (N, 4, 4, 4)

        batch_indices = torch.arange(self.num_envs, device=self.device)
        next_states = all_next_states[batch_indices, actions]  # (N, 4, 4)

        changed = (
            next_states.view(self.num_envs, -1) != self.board.view(self.num_envs, -1)
        ).any(dim=1)

        self.board = next_states.clone()
        flat = self.board.view(self.num_envs, -1)

        # loss is checked before win
        losses = ~(flat == 0).any(dim=1)
        wins = ~losses & (flat == self.settings.win_tile).any(dim=1)
        done = losses | wins

        self.loss_count += losses.long()
        self.win_count += wins.long()

        self.reset(torch.nonzero(done).squeeze(-1))
        self.add_random_tile(torch.nonzero(changed & ~done).squeeze(-1))

        return changed, wins, losses

    def get_valid_actions(self, all_next_states=None):
        # Returns (N, 4) float tensor, 1.0 where the action changes the board
        if all_next_states is None:
            all_next_states = self.get_moves()
        current = self.board.unsqueeze(1)

        diff = (all_next_states != current).view(self.num_envs, 4, -1).any(dim=2)
        return diff.float()
