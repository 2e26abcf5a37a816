import numpy as np

HEADER = "\x1b[35m"
BORDER = "\x1b[33;2m"
RESET = "\x1b[0m"
WINS = "\x1b[32;2m"
DIM = "\x1b[0;2m"
LOSSES = "\x1b[31;2m"

CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"

BANNER = (
    " ██████  ██████  ██   ██  ██████ ",
    "     ██  ██  ██  ██   ██  ██  ██ ",
    " ██████  ██  ██  ███████  ██████ ",
    " ██      ██  ██       ██  ██  ██ ",
    " ██████  ██████       ██  ██████ ",
)

# 24-bit foreground colours from the classic palette
TILE_COLORS = {
    2: "\x1b[39;2;238;228;218m",
    4: "\x1b[38;2;237;224;200m",
    8: "\x1b[38;2;242;177;121m",
    16: "\x1b[38;2;245;149;99m",
    32: "\x1b[38;2;246;124;95m",
    64: "\x1b[38;2;246;94;59m",
    128: "\x1b[38;2;237;207;114m",
    256: "\x1b[38;2;237;204;97m",
    512: "\x1b[38;2;237;200;80m",
    1024: "\x1b[38;2;237;197;63m",
    2048: "\x1b[38;2;237;194;46m",
}
DEFAULT_TILE_COLOR = "\x1b[31m"

CELL_WIDTH = 5
EOL = "\r\n"


def _rule(left: str, mid: str, right: str, columns: int) -> str:
    cells = f"─{mid}─".join("─" * CELL_WIDTH for _ in range(columns))
    return f"{BORDER}{left}─{cells}─{right}{RESET}{EOL}"


def _spacer(columns: int) -> str:
    cells = " │ ".join(" " * CELL_WIDTH for _ in range(columns))
    return f"{BORDER}│ {cells} │{RESET}{EOL}"


def _cell(value: int) -> str:
    if value == 0:
        return " " * CELL_WIDTH
    color = TILE_COLORS.get(value, DEFAULT_TILE_COLOR)
    return f"{RESET}{color}{value:^{CELL_WIDTH}}{BORDER}"


def render_grid(grid: np.ndarray, win_count: int, loss_count: int) -> str:
    """
    Draw the banner, the board and the win | loss tallies as one string.

    Lines end in CRLF so the output lines up on a terminal in raw mode.
    """
    rows, columns = grid.shape
    out = [HEADER]
    out.extend(line + EOL for line in BANNER)
    out.append(RESET + EOL)

    out.append(_rule("┌", "┬", "┐", columns))
    for y in range(rows):
        if y > 0:
            out.append(_rule("├", "┼", "┤", columns))
        out.append(_spacer(columns))
        cells = " │ ".join(_cell(int(value)) for value in grid[y])
        out.append(f"{BORDER}│ {cells} │{RESET}{EOL}")
        out.append(_spacer(columns))
    out.append(_rule("└", "┴", "┘", columns))

    out.append(f"{WINS}{' ' * 9}{win_count:^7}{RESET}")
    out.append(f"{DIM}|{LOSSES}{loss_count:^7}{RESET}{EOL}")
    return "".join(out)


def render_frame(game) -> str:
    """A full redraw of `game`: clear, home the cursor, draw."""
    return CLEAR_SCREEN + CURSOR_HOME + render_grid(
        game.grid, game.win_count, game.loss_count
    )
