"""Pure text functions behind the completion-marker protocol.

The multiplexer gives no exit status and no end-of-output signal, so a
command is sent as ``<command> && echo <marker>`` and the pane is read
until the marker shows up as output. Everything here works on captured
text only and never talks to the multiplexer.
"""

from __future__ import annotations

import uuid

MARKER_PREFIX = "__CMD_COMPLETE_"
MARKER_SUFFIX = "__"


def make_marker() -> str:
    """Return a fresh completion marker, unique per command."""
    return f"{MARKER_PREFIX}{uuid.uuid4()}{MARKER_SUFFIX}"


def wrap_command(command: str, marker: str) -> str:
    """Append the marker echo to a command line."""
    return f"{command} && echo {marker}"


def _is_marker_line(line: str, marker: str) -> bool:
    # The typed command line contains "echo <marker>"; the output line does not
    return marker in line and f"echo {marker}" not in line


def marker_found(content: str, marker: str) -> bool:
    """True once the marker appears as command output."""
    return any(_is_marker_line(line, marker) for line in content.rstrip().splitlines())


def extract_prompt_line(content: str) -> str:
    """Return the prompt fingerprint: the last line of a trimmed capture."""
    lines = content.strip().splitlines()
    return lines[-1] if lines else ""


def clean_output(content: str, marker: str, prompt: str) -> str:
    """Isolate a command's own output from a full pane capture.

    Lines are scanned bottom-up. Collection starts at the marker line
    (kept, without the marker, only if something remains) and stops at
    the first line starting with the prompt fingerprint or at the typed
    command line. Blank lines are dropped. Text without a marker is
    collected from the bottom, so clean text comes back unchanged.

    Example:
        >>> clean_output("$ ls && echo M\\nfile.txt\\nM\\n$ ", "M", "$ ")
        'file.txt'
    """
    lines = content.splitlines()
    collecting = not any(_is_marker_line(line, marker) for line in lines)
    collected: list[str] = []

    for line in reversed(lines):
        if not collecting:
            if _is_marker_line(line, marker):
                remainder = line.replace(marker, "")
                if remainder.strip():
                    collected.append(remainder)
                collecting = True
            continue

        if prompt and line.startswith(prompt):
            break
        if f"echo {marker}" in line:
            break
        if line.strip():
            collected.append(line)

    collected.reverse()
    return "\n".join(collected)
