from typing import IO, Iterable

from tile2048.game import Direction, Game
from tile2048.render import render_frame


def play(game: Game, keys: Iterable[str], out: IO[str]):
    """
    Draw `game`, then for every key: stop on a quit key, play the bound move
    if there is one, and redraw.
    """
    settings = game.settings
    out.write(render_frame(game))
    out.flush()

    for key in keys:
        if key in settings.quit_keys:
            break
        name = settings.key_bindings.get(key)
        if name is not None:
            game.move(Direction.parse(name))

        out.write(render_frame(game))
        out.flush()
