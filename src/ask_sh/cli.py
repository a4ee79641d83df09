"""Command-line interface for ask-sh."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Sequence
from typing import TextIO

from rich.console import Console

from ask_sh import __version__
from ask_sh.chat import ConversationOrchestrator, ReplyRenderer
from ask_sh.config import Config, load_config
from ask_sh.core.llm import ChatProvider, LLMError, create_provider
from ask_sh.logging import get_logger, setup_logging
from ask_sh.prompts import system_prompt, user_prompt
from ask_sh.shell_init import init_script
from ask_sh.system_info import SystemInfo
from ask_sh.tools import ApprovalPrompter, ToolDispatcher, available_tools
from ask_sh.tools.execute_command import SessionFactory

log = get_logger("cli")

DEBUG_FLAGS = frozenset({"--debug", "--debug_ask_sh"})

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="ask-sh",
        description="Ask an LLM to get things done in your terminal",
    )
    parser.add_argument(
        "-v", "--version",
        action="version",
        version=__version__,
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Print the shell function to eval in your shell rc file",
    )
    parser.add_argument(
        "--debug", "--debug_ask_sh",
        dest="debug",
        action="store_true",
        help="Log system info, parsed input and configuration",
    )
    parser.add_argument(
        "words",
        nargs=argparse.REMAINDER,
        help="The request; read from the first line of stdin when omitted",
    )
    return parser


def split_request(words: Sequence[str]) -> tuple[str, bool]:
    """Join request words, pulling out debug flags typed among them."""
    debug = any(word in DEBUG_FLAGS for word in words)
    request = " ".join(word for word in words if word not in DEBUG_FLAGS)
    return request.strip(), debug


def read_request(words: Sequence[str], stdin: TextIO) -> tuple[str, bool]:
    """Return the request text and whether it asked for debug mode.

    Without words the first line of stdin is the request.
    """
    if words:
        return split_request(words)
    line = stdin.readline()
    return split_request(line.split())


async def run_request(
    config: Config,
    request: str,
    *,
    console: Console,
    err_console: Console,
    system_info: SystemInfo | None = None,
    provider: ChatProvider | None = None,
    prompter: ApprovalPrompter | None = None,
    session_factory: SessionFactory | None = None,
) -> int:
    """Run one request through the conversation loop; return the exit code."""
    info = system_info or SystemInfo.detect()
    log.debug("OS: %s", info.os)
    log.debug("osArch: %s", info.arch)
    log.debug("shell: %s", info.shell)

    try:
        if provider is None:
            provider = create_provider(config.llm, available_tools(config))
    except LLMError as e:
        err_console.print(f"Communication with LLM provider failed: {e}", markup=False)
        return EXIT_FAILURE

    dispatcher = ToolDispatcher.from_config(
        config,
        console=console,
        prompter=prompter,
        session_factory=session_factory,
    )
    orchestrator = ConversationOrchestrator(
        provider,
        dispatcher,
        ReplyRenderer(console, markdown=config.chat.render_markdown),
        max_turns=config.chat.max_turns,
    )

    try:
        await orchestrator.run(
            system_prompt(info.os, info.arch, info.shell),
            user_prompt(request),
        )
    except LLMError as e:
        err_console.print(f"Communication with LLM provider failed: {e}", markup=False)
        return EXIT_FAILURE
    finally:
        await provider.aclose()

    return EXIT_OK


def run_cli(args: Sequence[str], stdin: TextIO | None = None) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.init:
        sys.stdout.write(init_script())
        return EXIT_OK

    request, debug_in_words = read_request(parsed.words, stdin or sys.stdin)

    config = load_config(project_root=os.getcwd())
    debug = parsed.debug or debug_in_words or config.debug
    setup_logging(config.logging, debug=debug)

    log.debug("args: %s", " ".join(args))
    log.debug("user_input: %s", request)
    log.debug("provider: %s, model: %s", config.llm.provider, config.llm.model or "(default)")
    log.debug("config: %s", config)

    err_console = Console(stderr=True)
    if not request:
        err_console.print("Usage: ask-sh <what you want to do>", markup=False)
        return EXIT_FAILURE

    try:
        return asyncio.run(
            run_request(config, request, console=Console(), err_console=err_console)
        )
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


def main() -> None:
    """Console script entry point."""
    sys.exit(run_cli(sys.argv[1:]))
