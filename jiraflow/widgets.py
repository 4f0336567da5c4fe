"""Small text widgets: help lines, the loading screen, a spinner and text fields."""

from __future__ import annotations

from dataclasses import dataclass

SPINNER_FRAMES = ("⣾ ", "⣽ ", "⣻ ", "⢿ ", "⡿ ", "⣟ ", "⣯ ", "⣷ ")
SEPARATOR = " • "
CHAR_LIMIT = 200


@dataclass(frozen=True)
class HelpItem:
    """A key binding and what it does."""

    key: str
    desc: str


class Spinner:
    """A braille dot spinner that advances one frame per tick."""

    fps = 10

    def __init__(self, frames: tuple[str, ...] = SPINNER_FRAMES) -> None:
        self.frames = frames
        self._index = 0

    def tick(self) -> str:
        """Advance to the next frame and return it."""
        self._index = (self._index + 1) % len(self.frames)
        return self.frame()

    def frame(self) -> str:
        """Return the current frame."""
        return self.frames[self._index]


@dataclass
class TextField:
    """A single-line text input with a prompt and a placeholder."""

    prompt: str = "> "
    placeholder: str = ""
    value: str = ""
    char_limit: int = 0
    width: int = 0
    password: bool = False
    echo_char: str = "•"
    focused: bool = False

    def insert(self, text: str) -> None:
        """Append *text*, keeping within the character limit."""
        if self.char_limit > 0:
            room = max(0, self.char_limit - len(self.value))
            text = text[:room]
        self.value += text

    def backspace(self) -> None:
        """Delete the last character."""
        self.value = self.value[:-1]

    def render(self) -> str:
        """Return the field as one line of text."""
        if not self.value:
            return self.prompt + self.placeholder
        shown = self.echo_char * len(self.value) if self.password else self.value
        return self.prompt + shown


def help_line(items: list[HelpItem]) -> str:
    """Render key bindings as ``key desc • key desc`` with one leading space."""
    return " " + SEPARATOR.join(f"{item.key} {item.desc}" for item in items)


def _center_block(text: str, width: int, height: int) -> str:
    lines = text.split("\n")
    block_width = max([width, *(len(line) for line in lines)])
    centered = []
    for line in lines:
        short = block_width - len(line)
        left = short // 2
        centered.append(" " * left + line + " " * (short - left))
    gap = max(0, height - len(centered))
    top = gap // 2
    blank = " " * block_width
    return "\n".join([blank] * top + centered + [blank] * (gap - top))


def loading_view(text: str, width: int, height: int, spinner_frame: str) -> str:
    """Render a centred spinner, message and quit hint filling the screen."""
    body = f"{spinner_frame} {text}\n\n" + help_line([HelpItem("q/ctrl+c", "Quit")])
    return _center_block(body, width, height)


def create_search_input(width: int) -> TextField:
    """Return the field used to search the ticket list."""
    return TextField(
        placeholder="Search for a ticket",
        char_limit=CHAR_LIMIT,
        width=width,
    )