"""Lifecycle engine shared by every entity-mutation command.

Phases, in order:
- set_defaults
- pre_interactive (interactive mode only)
- load
- post_interactive (interactive mode only)
- validate
- run

The first phase that raises aborts the action. Nothing that ran is undone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from trustkit.context import StoreContext
from trustkit.errors import PromptAbortedError
from trustkit.keyresolver import KeyResolver
from trustkit.prompts import Prompter


@dataclass
class ActionContext:
    store: StoreContext
    keys: KeyResolver
    prompter: Prompter | None = None
    interactive: bool = False

    @classmethod
    def create(
        cls,
        store: StoreContext,
        *,
        prompter: Prompter | None = None,
        interactive: bool = False,
    ) -> "ActionContext":
        return cls(store=store, keys=KeyResolver(store), prompter=prompter, interactive=interactive)

    @property
    def prompt(self) -> Prompter:
        if self.prompter is None:
            raise PromptAbortedError("no input available for interactive prompts")
        return self.prompter


class EntityLifecycle(Protocol):
    def set_defaults(self, ctx: ActionContext) -> None: ...

    def pre_interactive(self, ctx: ActionContext) -> None: ...

    def load(self, ctx: ActionContext) -> None: ...

    def post_interactive(self, ctx: ActionContext) -> None: ...

    def validate(self, ctx: ActionContext) -> None: ...

    def run(self, ctx: ActionContext) -> None: ...


def run_action(action: EntityLifecycle, ctx: ActionContext) -> None:
    if ctx.interactive and ctx.prompter is None:
        raise ValueError("interactive mode requires a prompter")

    action.set_defaults(ctx)
    if ctx.interactive:
        action.pre_interactive(ctx)
    action.load(ctx)
    if ctx.interactive:
        action.post_interactive(ctx)
    # Runs in both modes: flag-only invocations get the same checks.
    action.validate(ctx)
    action.run(ctx)
