"""proctable - Textual process table."""

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import DataTable, Footer, Header
from textual.widgets.data_table import RowDoesNotExist

from proctable.config import COLUMNS
from proctable.controller import InteractionController, State
from proctable.models import DisplayRow


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, rows: list[DisplayRow], *args, **kwargs) -> None:
        """Initialize ProcessTable with the rows to show first."""
        super().__init__(*args, **kwargs)
        self._initial_rows = rows

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Add columns and the first rows once mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"
        for column in COLUMNS:
            table.add_column(column.title, key=column.title.lower(), width=column.width)
        self.update_rows(self._initial_rows)

    @property
    def row_count(self) -> int:
        """Number of rows currently in the table."""
        return self.query_one("#process-table", DataTable).row_count

    def selected_row(self) -> list[str] | None:
        """Return the cells under the cursor, or None if there is no such row."""
        table = self.query_one("#process-table", DataTable)
        try:
            return [str(cell) for cell in table.get_row_at(table.cursor_row)]
        except RowDoesNotExist:
            return None

    def update_rows(self, rows: list[DisplayRow]) -> None:
        """Replace every row, keeping the cursor on the same index where possible."""
        table = self.query_one("#process-table", DataTable)
        cursor = table.cursor_row
        table.clear()
        table.add_rows(row.cells() for row in rows)
        if rows:
            table.move_cursor(row=min(max(cursor, 0), len(rows) - 1))


class ProctableApp(App):
    """Main proctable application."""

    TITLE = "proctable"

    CSS = """
    Screen {
        layout: vertical;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("ctrl+c", "quit", "Quit", show=False, priority=True),
        Binding("r", "refresh_rows", "Refresh"),
        Binding("d", "kill_selected", "Kill"),
    ]

    def __init__(self, controller: InteractionController) -> None:
        """Initialize the app around an already started controller."""
        super().__init__()
        self._controller = controller
        self.sub_title = f"sorted by {controller.monitor.config.sort_key.value}"

    @property
    def controller(self) -> InteractionController:
        """Get the interaction controller."""
        return self._controller

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield Header()
        yield ProcessTable(self._controller.rows)
        yield Footer()

    def on_mount(self) -> None:
        """Give the table keyboard focus."""
        self.query_one("#process-table", DataTable).focus()

    def _dispatch(self, key: str) -> None:
        """Run one key through the controller and redraw."""
        process_table = self.query_one(ProcessTable)
        self._controller.handle(key, process_table.selected_row())
        if self._controller.state is State.TERMINATED:
            self.exit()
            return
        process_table.update_rows(self._controller.rows)

    def action_refresh_rows(self) -> None:
        """Handle refresh action."""
        self._dispatch("r")

    def action_kill_selected(self) -> None:
        """Handle kill action on the highlighted row."""
        self._dispatch("d")

    async def action_quit(self) -> None:
        """Handle quit action."""
        self._dispatch("q")
