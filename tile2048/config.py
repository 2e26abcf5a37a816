from dataclasses import dataclass, field


def _default_bindings() -> dict[str, str]:
    return {
        "h": "left",
        "j": "down",
        "k": "up",
        "l": "right",
        # arrow keys
        "\x1b[D": "left",
        "\x1b[B": "down",
        "\x1b[A": "up",
        "\x1b[C": "right",
    }


@dataclass(frozen=True)
class Settings:
    """Game constants shared by the session, the batched engine and the scripts."""

    win_tile: int = 2048
    four_probability: float = 0.1
    terminal_pause: float = 0.4
    key_bindings: dict[str, str] = field(default_factory=_default_bindings)
    quit_keys: frozenset[str] = frozenset({"q", "\x03"})


DEFAULT_SETTINGS = Settings()
