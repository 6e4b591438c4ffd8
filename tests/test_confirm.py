"""Tests for the confirmation gate."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from subinstall.confirm import ConfirmationGate


class TestConfirmationGate:
    @pytest.mark.asyncio
    async def test_no_prompt_auto_accepts(self, quiet_console) -> None:
        prompter = MagicMock()
        gate = ConfirmationGate(prompter=prompter, no_prompt=True, console=quiet_console)
        assert await gate.confirm("Continue?") is True
        prompter.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["y", "Y", "yes", "YES", "Yes", " y "])
    async def test_affirmative_answers(self, answer: str, quiet_console) -> None:
        gate = ConfirmationGate(prompter=lambda _msg: answer, console=quiet_console)
        assert await gate.confirm("Continue?") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("answer", ["n", "no", "", "yeah", "ok"])
    async def test_everything_else_is_no(self, answer: str, quiet_console) -> None:
        gate = ConfirmationGate(prompter=lambda _msg: answer, console=quiet_console)
        assert await gate.confirm("Continue?") is False

    @pytest.mark.asyncio
    async def test_async_prompter(self, quiet_console) -> None:
        async def prompter(message: str) -> str:
            return "y"

        gate = ConfirmationGate(prompter=prompter, console=quiet_console)
        assert await gate.confirm("Continue?") is True

    @pytest.mark.asyncio
    async def test_prompt_receives_message(self, quiet_console) -> None:
        prompter = MagicMock(return_value="n")
        gate = ConfirmationGate(prompter=prompter, console=quiet_console)
        await gate.confirm("Grant access?")
        prompter.assert_called_once_with("Grant access?")

    @pytest.mark.asyncio
    async def test_blank_line_after_answer(self, quiet_console) -> None:
        gate = ConfirmationGate(prompter=lambda _msg: "y", console=quiet_console)
        await gate.confirm("Continue?")
        assert quiet_console.file.getvalue() == "\n"

    @pytest.mark.asyncio
    async def test_per_call_no_prompt(self, quiet_console) -> None:
        prompter = MagicMock(return_value="n")
        gate = ConfirmationGate(prompter=prompter, console=quiet_console)
        assert await gate.confirm("Continue?", no_prompt=True) is True
        prompter.assert_not_called()
        assert gate.no_prompt is False
