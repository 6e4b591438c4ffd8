"""
Confirmation gate for installs with side effects the user must accept.

With ``no_prompt`` set every question is answered "YES". Otherwise the
question goes to a prompter callable, sync or async, which returns the
raw answer text; "YES" and "Y" (any case) count as consent.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Optional, Union

import click
from rich.console import Console

Prompter = Callable[[str], Union[str, Awaitable[str]]]

_AFFIRMATIVE = ("YES", "Y")


def stdin_prompt(message: str) -> str:
    """Ask on the terminal and return the typed answer."""
    return click.prompt(message, default="", show_default=False, prompt_suffix=" ")


class ConfirmationGate:
    """Yes/no gate in front of risky install options.

    Args:
        prompter: Callable asking the question. Defaults to a terminal prompt.
        no_prompt: Auto-accept every question.
        console: Console used for the blank separator line.
    """

    def __init__(
        self,
        prompter: Optional[Prompter] = None,
        no_prompt: bool = False,
        console: Optional[Console] = None,
    ) -> None:
        self._prompter = prompter or stdin_prompt
        self.no_prompt = no_prompt
        self._console = console or Console()

    async def confirm(self, message: str, no_prompt: bool = False) -> bool:
        """Ask ``message`` and report whether the user agreed.

        ``no_prompt`` auto-accepts this one question on top of the
        gate-wide setting.
        """
        if no_prompt or self.no_prompt:
            answer = "YES"
        else:
            answer = self._prompter(message)
            if inspect.isawaitable(answer):
                answer = await answer
        # separates the answer from whatever gets printed next
        self._console.print()
        return (answer or "").strip().upper() in _AFFIRMATIVE
