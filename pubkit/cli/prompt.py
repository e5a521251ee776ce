from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum, auto

from pubkit.core.result import Err, Ok, Result
from pubkit.output.formatter import color_enabled, cyan, green
from pubkit.platform.terminal import Key, SystemTerminal, TerminalIO, erase_lines
from pubkit.services.errors import CANCELLED, ReleaseError

__all__ = [
    "MenuOption",
    "MenuSession",
    "MenuState",
    "PromptState",
    "TerminalPrompt",
]

# Prompt line, blank line and the echoed answer line.
QUERY_LINES = 3


@dataclass(frozen=True, slots=True)
class MenuOption:
    key: str
    label: str


class PromptState(Enum):
    IDLE = auto()
    RENDERING = auto()
    AWAITING_INPUT = auto()
    RESOLVED = auto()
    CANCELLED = auto()


@dataclass(slots=True)
class MenuState:
    options: tuple[MenuOption, ...]
    question: str | None = None
    selected_index: int = 0

    def __post_init__(self) -> None:
        if not self.options:
            raise ValueError("menu requires at least one option")
        self.selected_index %= len(self.options)

    @classmethod
    def build(cls, question: str | None, options: Mapping[str, str] | Sequence[str]) -> MenuState:
        """Options are either ``{key: label}`` or a list used as both."""
        if isinstance(options, Mapping):
            items = tuple(MenuOption(key=k, label=v) for k, v in options.items())
        else:
            items = tuple(MenuOption(key=o, label=o) for o in options)
        return cls(options=items, question=question)

    @property
    def selected(self) -> MenuOption:
        return self.options[self.selected_index]

    def move(self, offset: int) -> None:
        self.selected_index = (self.selected_index + offset) % len(self.options)

    def frame(self, *, color: bool) -> list[str]:
        lines: list[str] = []
        if self.question:
            lines.append(green(self.question, enabled=color))
            lines.append("")
        for i, opt in enumerate(self.options):
            if i == self.selected_index:
                lines.append(cyan(f"> {opt.label}", enabled=color))
            else:
                lines.append(f"  {opt.label}")
        return lines


class MenuSession:
    """One ``select`` interaction: draws the menu and consumes keys until Enter or cancel.

    The session holds raw mode for its whole lifetime and always erases its
    frame and restores the terminal before ``run`` returns or raises.
    """

    def __init__(self, menu: MenuState, terminal: TerminalIO, *, color: bool = False) -> None:
        self.menu = menu
        self.state = PromptState.IDLE
        self._terminal = terminal
        self._color = color
        self._drawn = 0

    def _draw(self) -> None:
        self.state = PromptState.RENDERING
        out = erase_lines(self._drawn) if self._drawn else ""
        lines = self.menu.frame(color=self._color)
        # Raw mode disables output post-processing, so lines need an explicit \r.
        self._terminal.write(out + "\r\n".join(lines) + "\r\n")
        self._drawn = len(lines)
        self.state = PromptState.AWAITING_INPUT

    def _erase(self) -> None:
        if self._drawn:
            self._terminal.write(erase_lines(self._drawn))
            self._drawn = 0

    def handle(self, key: Key) -> PromptState:
        """Apply one key event. Navigation redraws exactly once."""
        match key:
            case "up":
                self.menu.move(-1)
                self._draw()
            case "down":
                self.menu.move(1)
                self._draw()
            case "enter":
                self.state = PromptState.RESOLVED
            case "cancel":
                self.state = PromptState.CANCELLED
            case _:
                pass
        return self.state

    def run(self) -> Result[str, ReleaseError]:
        with self._terminal.raw_mode():
            try:
                self._draw()
                while self.state is PromptState.AWAITING_INPUT:
                    self.handle(self._terminal.read_key())
            finally:
                self._erase()

        if self.state is PromptState.RESOLVED:
            return Ok(self.menu.selected.key)
        return Err(CANCELLED)


def _not_interactive() -> ReleaseError:
    return ReleaseError(
        kind="not_interactive",
        message="interactive prompt requires a TTY",
        hint="Run pubkit from a terminal",
    )


class TerminalPrompt:
    """Menu selection and free-text questions on the terminal.

    Calls are sequential; one ``select`` or ``query`` at a time.
    """

    def __init__(self, terminal: TerminalIO | None = None, *, color: bool | None = None) -> None:
        self._terminal = terminal or SystemTerminal()
        self._color = color

    def select(
        self, question: str | None, options: Mapping[str, str] | Sequence[str]
    ) -> Result[str, ReleaseError]:
        """Let the user pick an option with Up/Down + Enter.

        Returns Ok(key) on Enter and Err(CANCELLED) on Escape or Ctrl+C.

        Raises:
            ValueError: If ``options`` is empty.
        """
        menu = MenuState.build(question, options)
        if not self._terminal.is_interactive():
            return Err(_not_interactive())
        color = color_enabled() if self._color is None else self._color
        return MenuSession(menu, self._terminal, color=color).run()

    def query(self, prompt_text: str) -> Result[str, ReleaseError]:
        """Ask for a line of text. An empty answer is a valid answer."""
        if not self._terminal.is_interactive():
            return Err(_not_interactive())
        color = color_enabled() if self._color is None else self._color
        self._terminal.write(green(prompt_text, enabled=color) + "\n\n")
        answer = self._terminal.read_line()
        self._terminal.write(erase_lines(QUERY_LINES))
        return Ok(answer)
