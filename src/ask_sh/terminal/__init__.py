"""Shell command execution through a terminal multiplexer.

Commands run in a real interactive shell hosted by tmux. Completion is
detected with a per-command marker and output is scraped from the pane.
"""

from ask_sh.terminal.errors import (
    CaptureError,
    CommandTimeoutError,
    SessionError,
    TerminalError,
)
from ask_sh.terminal.protocol import Multiplexer
from ask_sh.terminal.result import CaptureResult
from ask_sh.terminal.scrape import (
    clean_output,
    extract_prompt_line,
    make_marker,
    marker_found,
    wrap_command,
)
from ask_sh.terminal.session import TerminalSession
from ask_sh.terminal.tmux import TmuxMultiplexer

__all__ = [
    "Multiplexer",
    "TmuxMultiplexer",
    "TerminalSession",
    "CaptureResult",
    # Errors
    "TerminalError",
    "SessionError",
    "CommandTimeoutError",
    "CaptureError",
    # Output scraping
    "make_marker",
    "wrap_command",
    "marker_found",
    "extract_prompt_line",
    "clean_output",
]
