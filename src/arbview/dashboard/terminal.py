"""
Terminal dashboard.

Hosts the pages in a box-drawn panel that is repainted by the frame
scheduler. Only the visible page polls; switching pages cancels the old
page's pollers and mounts a fresh page.

Keys: 1-5 switch page, r refresh (retry), t next theme, q quit.
"""

import asyncio
import logging
import sys
import termios
import time
import tty
from typing import Any, TextIO

from arbview import __version__
from arbview.api.client import DashboardClientError
from arbview.api.source import DashboardDataSource
from arbview.config.settings import Settings, get_settings
from arbview.core.frames import FrameHandle, FrameScheduler
from arbview.core.types import ChangeDirection, ConnectionState
from arbview.dashboard.context import DashboardContext
from arbview.dashboard.metric_card import MetricCard
from arbview.dashboard.pages import (
    AlertsPage,
    DashboardPage,
    Page,
    SettingsPage,
    Sidebar,
    TransactionsPage,
    WalletsPage,
)
from arbview.telemetry.metrics import PollMetrics
from arbview.utils.formatting import format_currency, format_percentage
from arbview.utils.time import format_time_ago, format_uptime


logger = logging.getLogger(__name__)

PAGE_TYPES: tuple[type[Page], ...] = (
    DashboardPage,
    TransactionsPage,
    AlertsPage,
    WalletsPage,
    SettingsPage,
)

CONNECTION_LABELS: dict[ConnectionState, str] = {
    ConnectionState.IDLE: "○ Idle",
    ConnectionState.LOADING: "◌ Loading",
    ConnectionState.ERROR: "✖ Error",
    ConnectionState.UPDATING: "◉ Updating",
    ConnectionState.STALE: "◐ Stale",
    ConnectionState.CONNECTED: "● Live",
}

DIRECTION_MARKS: dict[ChangeDirection, str] = {
    ChangeDirection.UP: "▲",
    ChangeDirection.DOWN: "▼",
    ChangeDirection.NONE: " ",
}


class TerminalDashboard:
    """
    Real-time terminal dashboard.

    Displays a formatted panel with:
    - Page tabs and theme
    - Connection state and sidebar badges
    - Animated metric cards
    - Page details and the last fetch error
    """

    # Box drawing characters
    BOX_TL = "\u2554"  # ╔
    BOX_TR = "\u2557"  # ╗
    BOX_BL = "\u255a"  # ╚
    BOX_BR = "\u255d"  # ╝
    BOX_H = "\u2550"  # ═
    BOX_V = "\u2551"  # ║
    BOX_LT = "\u2560"  # ╠
    BOX_RT = "\u2563"  # ╣
    THIN_V = "\u2502"  # │

    def __init__(
        self,
        source: DashboardDataSource,
        context: DashboardContext,
        settings: Settings | None = None,
        metrics: PollMetrics | None = None,
        width: int = 72,
        output: TextIO | None = None,
    ) -> None:
        """
        Initialize the dashboard.

        Args:
            source: Backend client or demo provider.
            context: Theme and badge state.
            settings: Application settings.
            metrics: Poll metrics collector.
            width: Panel width in characters.
            output: Output stream (default: stdout).
        """
        self._source = source
        self._context = context
        self._settings = settings or get_settings()
        self._metrics = metrics or PollMetrics()
        self._width = width
        self._output = output or sys.stdout

        self._scheduler = FrameScheduler(self._settings.fps)
        self._frame_handle: FrameHandle | None = None
        self._sidebar = Sidebar(source, context, self._settings, self._metrics)
        self._page_index = 0
        self._page: Page = self._make_page(0)
        self._stopped = asyncio.Event()
        self._switch_lock = asyncio.Lock()
        self._action_error: str | None = None
        self._background: set[asyncio.Task[Any]] = set()

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def page(self) -> Page:
        return self._page

    @property
    def sidebar(self) -> Sidebar:
        return self._sidebar

    @property
    def scheduler(self) -> FrameScheduler:
        return self._scheduler

    @property
    def metrics(self) -> PollMetrics:
        return self._metrics

    # =========================================================================
    # Pages
    # =========================================================================

    def _make_page(self, index: int) -> Page:
        return PAGE_TYPES[index](self._source, self._settings, self._metrics)

    async def switch_page(self, index: int) -> Page:
        """
        Unmount the current page and mount another one.

        Raises:
            IndexError: If index is out of range.
        """
        if not 0 <= index < len(PAGE_TYPES):
            raise IndexError(f"No page {index}")
        async with self._switch_lock:
            if index == self._page_index and self._page.running:
                return self._page

            # Swap before awaiting so stop() always sees the mounted page
            old = self._page
            self._page_index = index
            self._page = self._make_page(index)
            self._page.start()
            self._action_error = None
            await old.stop()
            logger.debug(f"Switched to {self._page.title}")
            return self._page

    async def refresh(self) -> None:
        """Retry: re-poll the visible page and the sidebar."""
        self._action_error = None
        await asyncio.gather(self._page.refresh(), self._sidebar.refresh())

    # =========================================================================
    # Rendering
    # =========================================================================

    def _pad(self, text: str, width: int) -> str:
        """Pad text to width."""
        return text.ljust(width)[:width]

    def _line(self, content: str) -> str:
        return f"{self.BOX_V}{self._pad(content, self._width - 2)}{self.BOX_V}"

    def _divider(self) -> str:
        return f"{self.BOX_LT}{self.BOX_H * (self._width - 2)}{self.BOX_RT}"

    def _card_cell(self, card: MetricCard[Any], width: int) -> str:
        mark = DIRECTION_MARKS[card.direction] if card.enabled else " "
        text = f"  {card.label}: {card.render_value()} {mark}"
        return self._pad(text, width)

    def _detail_lines(self) -> list[str]:
        page = self._page
        lines: list[str] = []

        if isinstance(page, DashboardPage):
            for opp in page.top_opportunities():
                lines.append(
                    f"  {opp.token_in}/{opp.token_out:<6} {opp.exchange_in} → {opp.exchange_out}"
                    f"  {format_percentage(opp.profit_percentage)}"
                    f"  {format_currency(opp.profit_amount)}"
                )
        elif isinstance(page, TransactionsPage):
            for tx in page.recent(limit=6):
                lines.append(
                    f"  {tx.hash[:10]}…  {tx.type:<10} {tx.status:<9} "
                    f"{format_currency(tx.profit_loss):>10}  {format_time_ago(tx.timestamp)}"
                )
        elif isinstance(page, AlertsPage):
            for alert in (page.active.state.data or [])[:6]:
                lines.append(f"  [{alert.severity.upper():<8}] {alert.title} ({alert.status})")
        elif isinstance(page, WalletsPage):
            for wallet in (page.wallets.state.data or [])[:6]:
                status = "●" if wallet.is_connected else "○"
                lines.append(
                    f"  {status} {wallet.name:<14} {wallet.network:<10} "
                    f"{format_currency(wallet.balance_usd):>14}"
                )
        elif isinstance(page, SettingsPage):
            for name, poller in page.sections.items():
                state = poller.state
                label = CONNECTION_LABELS[state.connection_state]
                lines.append(f"  {name:<14} {label}")

        if not lines and self._page.connection_state is ConnectionState.LOADING:
            lines.append("  Loading...")
        return lines

    def render(self) -> str:
        """
        Render the dashboard.

        Returns:
            Formatted dashboard string.
        """
        badges = self._context.badges
        lines = []

        # Header
        lines.append(f"{self.BOX_TL}{self.BOX_H * (self._width - 2)}{self.BOX_TR}")
        lines.append(
            self._line(
                f"  ARBVIEW v{__version__} | {self._page.title.upper()} | "
                f"Theme: {self._context.theme_label}"
            )
        )
        tabs = "  ".join(
            f"[{i + 1}] {t.title}" if i != self._page_index else f"<{i + 1}> {t.title}"
            for i, t in enumerate(PAGE_TYPES)
        )
        lines.append(self._line(f"  {tabs}"))
        lines.append(self._divider())

        # Status row
        state = self._page.connection_state
        uptime = format_uptime(self._metrics.uptime_seconds)
        lines.append(
            self._line(
                f"  {CONNECTION_LABELS[state]}  {self.THIN_V}  Uptime: {uptime}  {self.THIN_V}  "
                f"Opps: {badges.opportunities}  Wallets: {badges.wallets}  Alerts: {badges.alerts}"
            )
        )
        lines.append(self._divider())

        # Cards, two per row
        half = (self._width - 3) // 2
        cards = self._page.cards
        for i in range(0, len(cards), 2):
            left = self._card_cell(cards[i], half)
            right = self._card_cell(cards[i + 1], half) if i + 1 < len(cards) else ""
            lines.append(self._line(f"{left}{self.THIN_V}{right}"))

        details = self._detail_lines()
        if details:
            lines.append(self._divider())
            lines.extend(self._line(d) for d in details)

        # Errors
        error = self._action_error or self._page.last_error
        if error:
            lines.append(self._divider())
            lines.append(self._line(f"  ! {error} (press r to retry)"))

        lines.append(self._divider())
        lines.append(self._line("  1-5 page  r refresh  t theme  q quit"))
        lines.append(f"{self.BOX_BL}{self.BOX_H * (self._width - 2)}{self.BOX_BR}")

        return "\n".join(lines)

    def display(self) -> None:
        """Repaint in place."""
        self._output.write("\033[H\033[J")
        self._output.write(self.render())
        self._output.write("\n")
        self._output.flush()

    def _on_frame(self, now: float) -> None:
        self._page.tick(now)
        self.display()

    # =========================================================================
    # Input
    # =========================================================================

    def _spawn(self, coro: Any) -> None:
        task = asyncio.create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._on_action_done)

    def _on_action_done(self, task: asyncio.Task[Any]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if isinstance(exc, DashboardClientError):
            self._action_error = str(exc)
            logger.warning(f"Action failed: {exc}")
        elif exc is not None:
            self._action_error = f"Unexpected error: {exc}"
            logger.error(f"Action failed: {exc!r}")

    def handle_key(self, key: str) -> None:
        """Dispatch one key press."""
        if key in ("q", "Q"):
            self._stopped.set()
        elif key in ("r", "R"):
            self._spawn(self.refresh())
        elif key in ("t", "T"):
            self._context.cycle_theme()
        elif key.isdigit() and 1 <= int(key) <= len(PAGE_TYPES):
            self._spawn(self.switch_page(int(key) - 1))

    def _read_key(self) -> None:
        data = sys.stdin.read(1)
        if data:
            self.handle_key(data)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start(self) -> None:
        """Mount the sidebar and the first page and start repainting."""
        self._sidebar.start()
        self._page.start()
        self._frame_handle = self._scheduler.register(self._on_frame)
        self._scheduler.start()
        logger.info("Terminal dashboard started")

    async def stop(self) -> None:
        """Cancel every poller, the frame loop, and pending actions."""
        if self._frame_handle:
            self._frame_handle.cancel()
            self._frame_handle = None
        await self._scheduler.stop()
        for task in list(self._background):
            task.cancel()
        await asyncio.gather(*self._background, return_exceptions=True)
        await asyncio.gather(self._page.stop(), self._sidebar.stop())
        logger.info("Terminal dashboard stopped")

    async def run(self) -> None:
        """Run until q is pressed or the task is cancelled."""
        loop = asyncio.get_running_loop()
        interactive = sys.stdin.isatty()
        saved: list[Any] | None = None

        if interactive:
            fd = sys.stdin.fileno()
            saved = termios.tcgetattr(fd)
            tty.setcbreak(fd)
            loop.add_reader(fd, self._read_key)

        self._output.write("\033[2J")
        self.start()
        try:
            await self._stopped.wait()
        finally:
            if interactive and saved is not None:
                loop.remove_reader(sys.stdin.fileno())
                termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, saved)
            await self.stop()

    def print_summary(self) -> None:
        """Print a final poll summary."""
        print("\n" + "=" * 50)
        print("  SESSION SUMMARY")
        print("=" * 50)
        print(f"  Uptime: {format_uptime(self._metrics.uptime_seconds)}")
        print(f"  Theme:  {self._context.theme_label}")
        print(f"  Ended:  {time.strftime('%Y-%m-%d %H:%M:%S')}")
        print()
        print("  POLLS (ok/failed/discarded, avg latency):")
        for name in self._metrics.poller_names:
            counters = self._metrics.get_counters(name)
            latency = self._metrics.get_latency_stats(name)
            print(
                f"    {name:<26} {counters.succeeded}/{counters.failed}/{counters.discarded}"
                f"  {latency.avg_ms:.0f}ms"
            )
        print("=" * 50)
