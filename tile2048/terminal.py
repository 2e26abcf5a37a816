import sys
import termios
import tty
from contextlib import contextmanager
from typing import IO, Iterator

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"


@contextmanager
def raw_terminal(stdin: IO[str] | None = None, stdout: IO[str] | None = None):
    """Put the terminal in raw mode with the cursor hidden, restoring both on exit."""
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    fd = stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        stdout.write(HIDE_CURSOR)
        stdout.flush()
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        stdout.write(SHOW_CURSOR)
        stdout.flush()


def keys(stdin: IO[str] | None = None) -> Iterator[str]:
    """
    Key presses until end of input. Arrow keys come back as their 3 character
    escape sequence. A lone Esc comes back by itself and the key read after
    it is kept for the next press.
    """
    stdin = stdin or sys.stdin
    pending = ""
    while True:
        ch, pending = pending or stdin.read(1), ""
        if ch == "":
            return
        if ch == "\x1b":
            following = stdin.read(1)
            if following == "[":
                ch += following + stdin.read(1)
            else:
                pending = following
        yield ch
