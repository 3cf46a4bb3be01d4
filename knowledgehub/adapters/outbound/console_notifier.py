"""Console notifier: prints transient notifications with Rich."""

import logging

from rich.console import Console

from ...core.domain import Notification

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """Prints each notification once and mirrors it to the log."""

    def __init__(self, console: Console | None = None, quiet: bool = False) -> None:
        """Initialize the notifier.

        Args:
            console: Rich console to print to. Defaults to stderr.
            quiet: If True, only errors are printed; everything is still logged.
        """
        self.console = console or Console(stderr=True)
        self.quiet = quiet

    def notify(self, notification: Notification) -> None:
        if notification.is_error:
            logger.warning(f"{notification.title}: {notification.description}")
            self.console.print(f"[bold red]{notification.title}:[/] {notification.description}")
            return

        logger.info(f"{notification.title}: {notification.description}")
        if not self.quiet:
            self.console.print(f"[bold green]{notification.title}:[/] {notification.description}")
