"""
Rich-based live progress panel for long index scans.

Usage:
    with ProgressDisplay("Indexing") as progress:
        for n, line in enumerate(lines, 1):
            progress.update(Lines=n, Records=count)
"""

import time
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


class ProgressDisplay:
    """
    Context manager that shows updating metrics without scrolling.

    The first metric passed to update() drives the Rate row. When `enabled`
    is False (or stderr is not a terminal and `force` is False) metrics are
    still tracked but nothing is drawn.
    """

    def __init__(
        self,
        title: str = "Progress",
        update_interval: int = 5000,
        enabled: bool = True,
        force: bool = False,
        console: Optional[Console] = None
    ):
        self.title = title
        self.update_interval = update_interval
        self.console = console or Console(stderr=True)
        self.enabled = enabled and (force or self.console.is_terminal)

        self.metrics: Dict[str, Any] = {}
        self.live: Optional[Live] = None
        self.start_time: float = 0
        self.iteration_count: int = 0
        self._primary_metric: Optional[str] = None

    def __enter__(self):
        self.start_time = time.time()
        self.metrics["Elapsed"] = 0.0
        if self.enabled:
            self.live = Live(self._make_panel(), console=self.console, refresh_per_second=4)
            self.live.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self._update_timing()
        if self.live:
            self.live.update(self._make_panel())
            self.live.__exit__(exc_type, exc_val, exc_tb)
        return False

    def update(self, **metrics):
        self.iteration_count += 1
        self.metrics.update(metrics)
        if self._primary_metric is None and metrics:
            self._primary_metric = next(iter(metrics))

        if self.iteration_count % self.update_interval == 0:
            self._update_timing()
            if self.live:
                self.live.update(self._make_panel())

    def _update_timing(self):
        elapsed = time.time() - self.start_time
        self.metrics["Elapsed"] = elapsed
        count = self.metrics.get(self._primary_metric) if self._primary_metric else None
        if elapsed > 0 and isinstance(count, (int, float)):
            self.metrics["Rate"] = count / elapsed

    def _make_panel(self) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(justify="left", no_wrap=True)
        grid.add_column(justify="right", no_wrap=True)
        for key, value in self.metrics.items():
            grid.add_row(
                Text(f"{key}:", style="bold grey50"),
                Text(format_metric(key, value), style="bright_cyan"),
            )
        return Panel(grid, title=self.title, box=box.SIMPLE, border_style="bright_black")


def format_metric(key: str, value: Any) -> str:
    if isinstance(value, float):
        if key == "Elapsed":
            minutes, seconds = divmod(int(value), 60)
            hours, minutes = divmod(minutes, 60)
            if hours:
                return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
            return f"{minutes:02d}:{seconds:02d}"
        if key == "Rate":
            return f"{value:,.1f}/s"
        return f"{value:,.2f}"
    if isinstance(value, int):
        return f"{value:,}"
    return str(value)
