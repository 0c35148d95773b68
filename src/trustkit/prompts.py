"""Line-oriented interactive prompts over injectable streams."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

from trustkit.errors import PromptAbortedError, ValidationError


class Prompter:
    def __init__(self, *, stdin: TextIO = sys.stdin, stdout: TextIO = sys.stdout) -> None:
        self._stdin = stdin
        self._stdout = stdout

    def _read_line(self, label: str) -> str:
        print(label, end="", file=self._stdout, flush=True)
        line = self._stdin.readline()
        if not line:
            raise PromptAbortedError(f"input aborted at prompt: {label.strip()}")
        return line.rstrip("\r\n")

    def text(self, label: str, *, default: str | None = None) -> str:
        suffix = f" [{default}]" if default else ""
        answer = self._read_line(f"? {label}{suffix}: ").strip()
        if not answer and default is not None:
            answer = default
        return answer

    def list_input(self, label: str, *, default: Sequence[str] | None = None) -> list[str]:
        """Comma separated answer; an empty answer keeps `default`."""
        current = ",".join(default or ())
        answer = self.text(f"{label} (comma separated)", default=current or None)
        if not answer:
            return list(default or ())
        return [part.strip() for part in answer.split(",") if part.strip()]

    def confirm(self, label: str, *, default: bool = False) -> bool:
        hint = "Y/n" if default else "y/N"
        answer = self._read_line(f"? {label} ({hint}): ").strip().lower()
        if not answer:
            return default
        if answer in {"y", "yes"}:
            return True
        if answer in {"n", "no"}:
            return False
        raise ValidationError(f"expected yes or no, got {answer!r}")

    def select(self, label: str, choices: Sequence[str], *, default: int = 0) -> int:
        if not choices:
            raise ValidationError(f"nothing to select for: {label}")
        print(f"? {label}", file=self._stdout)
        for index, choice in enumerate(choices, start=1):
            print(f"  {index}) {choice}", file=self._stdout)
        answer = self._read_line(f"  choice [{default + 1}]: ").strip()
        if not answer:
            return default
        if answer in choices:
            return list(choices).index(answer)
        if answer.isdigit() and 1 <= int(answer) <= len(choices):
            return int(answer) - 1
        raise ValidationError(f"invalid choice {answer!r} for: {label}")

