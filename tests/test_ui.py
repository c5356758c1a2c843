from dataclasses import replace

from dockdash.config import ColorTheme
from dockdash.messages import ContainersLoaded, KeyPressed
from dockdash.model import AppState, ContainerRecord, Mode, OpKind, PendingOp
from dockdash.state import StateMachine
from dockdash.ui import (
    FILTER_PLACEHOLDER, HELP_BROWSING, HELP_FILTERING, Renderer, Theme,
)

THEME = Theme()
RECORDS = (
    ContainerRecord(id="a1", name="/web", image="nginx", state="running"),
    ContainerRecord(id="b2", name="/db", image="postgres", state="exited"),
)


def loaded_state(*keys):
    machine = StateMachine()
    machine.dispatch(ContainersLoaded(RECORDS))
    for key in keys:
        machine.dispatch(KeyPressed(key))
    return machine.state


def test_title_counts_containers():
    text = Renderer(THEME).title(loaded_state())
    assert text.plain.endswith("(2 containers)")


def test_title_shows_filtered_count():
    text = Renderer(THEME).title(loaded_state("/", "w", "e", "b"))
    assert text.plain.endswith("(1 of 2 containers)")


def test_filter_line_placeholder_while_empty():
    text = Renderer(THEME).filter_line(loaded_state("/"))
    assert text.plain.startswith("Filter: ")
    assert FILTER_PLACEHOLDER in text.plain


def test_filter_line_after_commit():
    text = Renderer(THEME).filter_line(loaded_state("/", "d", "b", "enter"))
    assert text.plain == "Filter: db"


def test_filter_line_hidden_without_filter():
    assert Renderer(THEME).filter_line(loaded_state()).plain == ""


def test_status_style_by_outcome():
    renderer = Renderer(THEME)
    assert renderer.status_style("Container a1 started successfully") == THEME.success
    assert renderer.status_style("Failed to stop container a1: boom") == THEME.error
    assert renderer.status_style("Refreshing...") == THEME.info


def test_status_line_marks_loading():
    state = replace(AppState(), pending=PendingOp(OpKind.REFRESH, 1), status="Refreshing...")
    text = Renderer(THEME).status_line(state)
    assert text.plain.endswith("Refreshing...")
    assert text.plain != "Refreshing..."


def test_help_per_mode():
    renderer = Renderer(THEME)
    assert renderer.help_line(AppState()).plain == HELP_BROWSING
    assert renderer.help_line(AppState(mode=Mode.FILTERING)).plain == HELP_FILTERING


def test_status_cells_styled_from_theme():
    renderer = Renderer(Theme(running="green", stopped="red", paused="yellow"))
    assert renderer.status_cell("RUNNING").style == "green"
    assert renderer.status_cell("STOPPED").style == "red"
    assert renderer.status_cell("DEAD").style == "red"
    assert renderer.status_cell("CREATED").style == "yellow"
    assert renderer.status_cell("UNKNOWN").style == ""


def test_rows_keep_plain_columns():
    rows = Renderer(THEME).rows(loaded_state())
    assert rows[0][:3] == ("a1", "web", "nginx")
    assert rows[0][3].plain == "RUNNING"


def test_renderers_are_independent():
    # Two renderers with different themes never share styles
    plain = Renderer(Theme(running="white"))
    loud = Renderer(Theme(running="bold magenta"))
    assert plain.status_cell("RUNNING").style == "white"
    assert loud.status_cell("RUNNING").style == "bold magenta"


def test_theme_from_config_colors():
    colors = ColorTheme(title="bold blue", error="red")
    theme = Theme.from_color_theme(colors)
    assert theme.title == "bold blue"
    assert theme.error == "red"
    assert theme.help == ColorTheme().help


def test_error_line():
    state = AppState(mode=Mode.TERMINATING, error="docker ps failed: boom")
    assert Renderer(THEME).error_line(state).plain == "Error: docker ps failed: boom"
