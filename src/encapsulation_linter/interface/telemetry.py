"""Telemetry: user-facing progress routed through `logging` and a Rich console."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from encapsulation_linter.domain.protocols import TelemetryPort

logger = logging.getLogger("encapsulation_linter")


def configure_logging(console: Console, level: int = logging.INFO) -> None:
    """Point the package logger at `console`, replacing any RichHandler installed before."""
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    rich_handler = RichHandler(
        console=console,
        show_time=False,
        omit_repeated_times=False,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logger.setLevel(level)
    logger.addHandler(rich_handler)
    logger.propagate = False


class ProjectTelemetry(TelemetryPort):
    """TelemetryPort implementation: banner on handshake, log records for everything else."""

    def __init__(
        self,
        project_name: str,
        color: str = "cyan",
        welcome: str = "",
        console: Optional[Console] = None,
    ) -> None:
        self.project_name = project_name
        self.color = color
        self.welcome = welcome
        self.console = console or Console(stderr=True)
        self.logger = logger
        configure_logging(self.console)

    def handshake(self) -> None:
        banner = f"[bold {self.color}]{self.project_name}[/]"
        if self.welcome:
            banner += f" [dim]{self.welcome}[/]"
        self.console.print(banner)
        self.logger.info("%s session started", self.project_name)

    def step(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)
