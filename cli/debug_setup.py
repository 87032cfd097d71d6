"""Debug console setup for CLI"""

import io
import logging
import re
from typing import Optional

from rich.console import Console

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(Console):
    """Rich Console that also writes a plain-text copy of everything it prints to a logger"""

    def __init__(self, debug_logger: logging.Logger, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_plain(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"[CONSOLE] {plain_text}")

    def _render_plain(self, *objects, **kwargs) -> str:
        buffer = io.StringIO()
        Console(file=buffer, force_terminal=False, width=self.width).print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', buffer.getvalue()).rstrip()


def setup_debug_console(debug: bool, bind_address: str, debug_logger: Optional[logging.Logger] = None) -> Console:
    """
    Setup debug console based on debug mode

    Args:
        debug: Whether debug mode is enabled
        bind_address: The bind address for the web front
        debug_logger: Logger receiving captured console output (defaults to "cli.console")

    Returns:
        Console instance (either regular or debug-enabled)
    """
    if not debug:
        return Console()

    debug_logger = debug_logger or logging.getLogger("cli.console")
    debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
    debug_logger.debug(f"[CLI] Bind address: {bind_address}")
    return DebugCapturingConsole(debug_logger=debug_logger)
