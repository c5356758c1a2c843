"""
Rendering of the dashboard chrome and table cells.

Renderer turns an AppState into rich Text objects; it holds no state of its
own beyond the Theme it was built with, so every method is a pure function of
its arguments and can be checked without a terminal.

Layout (top to bottom):
  - Title: name and container count
  - Filter: prompt while editing, or the applied filter
  - Status: transient message, colored by outcome
  - Table: ID / NAME / IMAGE / STATUS / PORTS (status cell colored)
  - Help: key reminders for the current mode
"""

from dataclasses import dataclass
from typing import List, Tuple

from rich.text import Text

from .model import AppState, Mode, Row

TITLE = "🐳 Container Dashboard"
FILTER_PROMPT = "Filter: "
FILTER_PLACEHOLDER = "Type to filter containers..."
CURSOR = "█"
LOADING_MARK = "⟳ "
HELP_BROWSING = "↑↓: navigate • /: filter • r: refresh • s: start • x: stop • d: delete • q: quit"
HELP_FILTERING = "Enter: apply filter • Esc: cancel • Ctrl+C: quit"


@dataclass(frozen=True)
class Theme:
    """Rich style strings used by the renderer."""
    title: str = "bold color(86)"
    filter: str = "bold color(205)"
    help: str = "color(241)"
    running: str = "color(82)"
    stopped: str = "color(196)"
    paused: str = "color(226)"
    success: str = "color(82)"
    error: str = "bold color(196)"
    info: str = "color(86)"

    @classmethod
    def from_color_theme(cls, colors) -> "Theme":
        return cls(
            title=colors.title,
            filter=colors.filter,
            help=colors.help,
            running=colors.running,
            stopped=colors.stopped,
            paused=colors.paused,
            success=colors.success,
            error=colors.error,
            info=colors.info,
        )


class Renderer:
    def __init__(self, theme: Theme = Theme()):
        self.theme = theme
        self._status_styles = {
            "RUNNING": theme.running,
            "STOPPED": theme.stopped,
            "REMOVING": theme.stopped,
            "DEAD": theme.stopped,
            "PAUSED": theme.paused,
            "RESTART": theme.paused,
            "CREATED": theme.paused,
        }

    def title(self, state: AppState) -> Text:
        text = Text(TITLE, style=self.theme.title)
        total = len(state.records)
        if state.filter_text:
            text.append(f" ({len(state.rows)} of {total} containers)")
        else:
            text.append(f" ({total} containers)")
        return text

    def filter_line(self, state: AppState) -> Text:
        if state.mode is Mode.FILTERING:
            text = Text(FILTER_PROMPT, style=self.theme.filter)
            if state.filter_text:
                text.append(state.filter_text)
                text.append(CURSOR)
            else:
                text.append(CURSOR)
                text.append(FILTER_PLACEHOLDER, style=self.theme.help)
            return text
        if state.filter_text:
            return Text(f"{FILTER_PROMPT}{state.filter_text}", style=self.theme.filter)
        return Text("")

    def status_style(self, message: str) -> str:
        if "successfully" in message:
            return self.theme.success
        if "Failed" in message:
            return self.theme.error
        return self.theme.info

    def status_line(self, state: AppState) -> Text:
        text = Text()
        if state.loading:
            text.append(LOADING_MARK, style=self.theme.info)
        if state.status:
            text.append(state.status, style=self.status_style(state.status))
        return text

    def help_line(self, state: AppState) -> Text:
        help_text = HELP_FILTERING if state.mode is Mode.FILTERING else HELP_BROWSING
        return Text(help_text, style=self.theme.help)

    def status_cell(self, label: str) -> Text:
        return Text(label, style=self._status_styles.get(label, ""))

    def row(self, row: Row) -> Tuple[str, str, str, Text, str]:
        id_, name, image, status, ports = row
        return (id_, name, image, self.status_cell(status), ports)

    def rows(self, state: AppState) -> List[Tuple[str, str, str, Text, str]]:
        return [self.row(r) for r in state.rows]

    def error_line(self, state: AppState) -> Text:
        return Text(f"Error: {state.error}", style=self.theme.error)
