"""Interactive terminal prompts for the setup wizard."""

import getpass
import sys
from collections.abc import Callable, Sequence
from typing import TextIO


class Prompter:
    """Ask questions on the terminal; input functions are injectable for tests."""

    def __init__(
        self,
        input_func: Callable[[str], str] = input,
        secret_func: Callable[[str], str] = getpass.getpass,
        stream: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._secret = secret_func
        self._stream = stream

    def _say(self, message: str) -> None:
        print(message, file=self._stream if self._stream is not None else sys.stderr)

    def ask_yes_no(self, prompt: str, default: bool = False) -> bool:
        suffix = "[Y/n]" if default else "[y/N]"
        while True:
            answer = self._input(f"{prompt} {suffix}: ").strip().lower()
            if not answer:
                return default
            if answer in {"y", "yes"}:
                return True
            if answer in {"n", "no"}:
                return False
            self._say("Please answer yes or no.")

    def ask_input(self, prompt: str, default: str = "") -> str:
        label = f"{prompt} [{default}]: " if default else f"{prompt}: "
        answer = self._input(label).strip()
        return answer or default

    def ask_secret(self, prompt: str) -> str:
        return self._secret(f"{prompt}: ").strip()

    def choose(self, prompt: str, choices: Sequence[str]) -> str:
        """Ask until the answer is one of choices."""
        while True:
            answer = self._input(f"{prompt}: ").strip()
            if answer in choices:
                return answer
            self._say(f"Please enter one of: {', '.join(choices)}")
