"""Interactive yes/no approval before running a risky command."""

from __future__ import annotations

from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML

APPROVAL_QUESTION = "Is it alright if I run this command and read the output?"

_YES = frozenset({"y", "yes"})


def parse_answer(answer: str | None) -> bool:
    """Only an explicit y/yes approves; anything else declines."""
    return answer is not None and answer.strip().lower() in _YES


class ApprovalPrompter(Protocol):
    """Asks the user to confirm an action."""

    async def confirm(self, question: str, help_text: str) -> bool:
        """Return True only if the user approved."""
        ...


class ConsoleApprovalPrompter:
    """Approval prompt on the controlling terminal, default No."""

    def __init__(self, session: PromptSession[str] | None = None) -> None:
        self._session: PromptSession[str] | None = session

    async def confirm(self, question: str, help_text: str) -> bool:
        # Needs a terminal, so only created once a prompt is actually shown
        if self._session is None:
            self._session = PromptSession()
        try:
            answer = await self._session.prompt_async(
                HTML("<b>? </b>{} <i>(y/N)</i> ").format(question),
                bottom_toolbar=HTML("<i>{}</i>").format(help_text),
            )
        except (EOFError, KeyboardInterrupt):
            return False
        return parse_answer(answer)
