"""procsift - Main Textual application."""

import signal
from queue import Empty, Queue

import structlog
from rich.markup import escape
from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Checkbox, DataTable, Footer, Input, Select, Static

from procsift import actions
from procsift.config import Config
from procsift.logging import configure
from procsift.models import ProcessRecord, Snapshot
from procsift.monitor import SystemMonitor
from procsift.query import SearchMode
from procsift.sorting import Direction, SortKey
from procsift.view import ResultView

log = structlog.get_logger()

SEARCH_HELP = 'Search... labels: pid:643 owner:root name:"firefox"'


class SearchBar(Horizontal):
    """Search input, mode toggles and bulk actions."""

    BINDINGS = [
        ("escape", "app.focus_table", "Table"),
    ]

    DEFAULT_CSS = """
    SearchBar {
        height: auto;
        padding: 0 1;
    }

    SearchBar Input {
        width: 1fr;
    }

    SearchBar Select {
        width: 16;
    }
    """

    def __init__(self, mode: SearchMode, *args, **kwargs) -> None:
        """Initialize SearchBar with the initial toggle state."""
        super().__init__(*args, **kwargs)
        self._initial_mode = mode

    def compose(self) -> ComposeResult:
        """Compose the search bar."""
        yield Input(placeholder=SEARCH_HELP, id="search")
        yield Checkbox("Regex", self._initial_mode.regex, id="regex")
        yield Checkbox("Label search", self._initial_mode.label_search, id="label-search")
        yield Checkbox("Case sensitive", self._initial_mode.case_sensitive, id="case-sensitive")
        yield Button("Kill all", id="kill-all", variant="error")
        yield Select(
            [(sig.name, sig) for sig in actions.SUPPORTED_SIGNALS],
            allow_blank=False,
            id="signal",
        )
        yield Button("Send to all", id="send-all", variant="warning")

    @property
    def text(self) -> str:
        """Get the current search text."""
        return self.query_one("#search", Input).value

    @property
    def mode(self) -> SearchMode:
        """Get the current search toggles."""
        return SearchMode(
            case_sensitive=self.query_one("#case-sensitive", Checkbox).value,
            regex=self.query_one("#regex", Checkbox).value,
            label_search=self.query_one("#label-search", Checkbox).value,
        )

    @property
    def selected_signal(self) -> signal.Signals:
        """Get the signal chosen for bulk delivery."""
        return self.query_one("#signal", Select).value


class ProcessTable(Container):
    """Container for the process data table."""

    DEFAULT_CSS = """
    ProcessTable {
        height: 1fr;
        border: solid $primary;
    }
    """

    def __init__(self, *args, **kwargs) -> None:
        """Initialize ProcessTable."""
        super().__init__(*args, **kwargs)
        self._records: tuple[ProcessRecord, ...] = ()

    @property
    def records(self) -> tuple[ProcessRecord, ...]:
        """Get the records currently displayed."""
        return self._records

    @property
    def selected(self) -> ProcessRecord | None:
        """Get the record under the cursor."""
        table = self.query_one("#process-table", DataTable)
        row = table.cursor_row
        if 0 <= row < len(self._records):
            return self._records[row]
        return None

    def compose(self) -> ComposeResult:
        """Compose the process table."""
        yield DataTable(id="process-table")

    def on_mount(self) -> None:
        """Initialize the data table when mounted."""
        table = self.query_one("#process-table", DataTable)
        table.cursor_type = "row"

        table.add_column("PID", key=SortKey.PID.value, width=8)
        table.add_column("Owner", key=SortKey.OWNER.value, width=16)
        table.add_column("Name", key=SortKey.NAME.value)

    def show(self, records: tuple[ProcessRecord, ...]) -> None:
        """
        Replace the table contents with ``records`` in the given order.

        The cursor follows the selected process when it is still present.
        """
        table = self.query_one("#process-table", DataTable)
        selected = self.selected

        table.clear()
        for record in records:
            table.add_row(
                str(record.pid),
                record.username if record.username is not None else "?",
                record.name,
                key=str(record.pid),
            )
        self._records = records

        if selected is not None:
            for index, record in enumerate(records):
                if record.pid == selected.pid:
                    table.move_cursor(row=index)
                    break


class ProcsiftApp(App):
    """Main procsift application."""

    TITLE = "procsift"
    SUB_TITLE = "Process Inspector"
    AUTO_FOCUS = "#process-table"

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 1;
        padding: 0 1;
    }
    """

    BINDINGS = [
        ("q", "quit", "Quit"),
        ("slash", "focus_search", "Search"),
        ("f6", "sort", "Sort"),
        ("r", "reverse", "Reverse"),
        ("k", "kill", "Kill"),
        ("t", "terminate", "Terminate"),
        ("c", "copy_name", "Copy name"),
        ("p", "copy_pid", "Copy PID"),
    ]

    def __init__(self, config: Config | None = None) -> None:
        """Initialize the ProcsiftApp."""
        super().__init__()
        self.config = config or Config()
        self.results = ResultView(self.config.sort.to_state())
        self._latest = Snapshot(timestamp=0.0)
        self._update_queue: Queue[Snapshot] = Queue()
        self._monitor = SystemMonitor(
            self._update_queue,
            poll_rate=self.config.sampling.update_interval_ms / 1000,
        )

    def compose(self) -> ComposeResult:
        """Compose the application layout."""
        yield SearchBar(self.config.search.to_mode(), id="search-bar")
        yield ProcessTable()
        yield Static("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        """Start the sampler and the refresh timer."""
        self._monitor.start()
        self.set_interval(self.config.sampling.refresh_interval, self._check_for_updates)

    def on_unmount(self) -> None:
        """Stop the sampler on shutdown."""
        self._monitor.stop()

    def _check_for_updates(self) -> None:
        """Take the most recent snapshot, if any, and refresh the results."""
        while True:
            try:
                self._latest = self._update_queue.get_nowait()
            except Empty:
                break
        self.refresh_results()

    def refresh_results(self) -> None:
        """Run the search over the latest snapshot and redraw."""
        search_bar = self.query_one(SearchBar)
        self.results.refresh(self._latest, search_bar.text, search_bar.mode)
        self._redraw()

    def show_snapshot(self, snapshot: Snapshot) -> None:
        """Replace the latest snapshot and refresh immediately."""
        self._latest = snapshot
        self.refresh_results()

    def _update_status(self) -> None:
        state = self.results.sort_state
        arrow = "▲" if state.direction is Direction.ASCENDING else "▼"
        status = f"{len(self.results)} of {len(self._latest)} processes"
        status += f" | sort: {state.key.value} {arrow}"
        if self.results.error:
            status += f" | [red]{escape(self.results.error)}[/red]"
        self.query_one("#status", Static).update(status)

    def _redraw(self) -> None:
        self.query_one(ProcessTable).show(self.results.records)
        self._update_status()

    def on_input_changed(self, event: Input.Changed) -> None:
        """Re-run the search as the user types."""
        self.refresh_results()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        """Re-run the search when a mode toggle changes."""
        self.refresh_results()

    def on_data_table_header_selected(self, event: DataTable.HeaderSelected) -> None:
        """Sort by the clicked column, flipping direction on a repeat click."""
        self.results.select_sort(SortKey(event.column_key.value))
        self._redraw()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Apply a bulk action to every visible process."""
        if event.button.id == "kill-all":
            count = self.results.apply_to_all(actions.kill)
            self.notify(f"Sent kill to {count} processes")
        elif event.button.id == "send-all":
            sig = self.query_one(SearchBar).selected_signal
            count = self.results.apply_to_all(lambda record: actions.send_signal(record, sig))
            self.notify(f"Sent {sig.name} to {count} processes")

    def action_focus_search(self) -> None:
        """Move focus to the search input."""
        self.query_one("#search", Input).focus()

    def action_focus_table(self) -> None:
        """Move focus back to the process table."""
        self.query_one("#process-table", DataTable).focus()

    def action_sort(self) -> None:
        """Cycle to the next sort key."""
        keys = list(SortKey)
        current = self.results.sort_state.key
        state = self.results.select_sort(keys[(keys.index(current) + 1) % len(keys)])
        self._redraw()
        self.notify(f"Sort: {state.key.value.upper()}")

    def action_reverse(self) -> None:
        """Flip the sort direction."""
        self.results.select_sort(self.results.sort_state.key)
        self._redraw()

    def action_kill(self) -> None:
        """Kill the selected process."""
        record = self.query_one(ProcessTable).selected
        if record is not None and not actions.kill(record):
            self.notify(f"Could not kill {record.pid}", severity="error")

    def action_terminate(self) -> None:
        """Terminate the selected process."""
        record = self.query_one(ProcessTable).selected
        if record is not None and not actions.terminate(record):
            self.notify(f"Could not terminate {record.pid}", severity="error")

    def action_copy_name(self) -> None:
        """Copy the selected process name to the clipboard."""
        record = self.query_one(ProcessTable).selected
        if record is not None:
            self.copy_to_clipboard(record.name)

    def action_copy_pid(self) -> None:
        """Copy the selected PID to the clipboard."""
        record = self.query_one(ProcessTable).selected
        if record is not None:
            self.copy_to_clipboard(str(record.pid))

    def action_quit(self) -> None:
        """Handle quit action with graceful cleanup."""
        self._monitor.stop()
        self.exit()


def main() -> None:
    """Entry point for procsift application."""
    config = Config.load()
    configure(config.log_path, config.logging.level)
    log.info("procsift_starting", config=str(config.config_path))
    app = ProcsiftApp(config)
    app.run()


if __name__ == "__main__":
    main()
