"""Privilege escalation decision.

Decide, once per invocation, whether a command runs through the escalation
helper or directly, and build the argument vector to hand off.

Decision order (first match wins):
- REX_DISABLE_SUDO is exactly "1": run directly, the helper is not probed.
- the helper resolves on the search path: run ``<helper> -E <command...>``.
- otherwise run directly; a missing helper is not an error.
"""
from __future__ import annotations

import logging
import shlex
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import WrapperSettings

logger = logging.getLogger(__name__)

Which = Callable[..., Optional[str]]


class ExecutionDecision(Enum):
    DIRECT = 'direct'
    ESCALATED = 'escalated'
    DIRECT_FALLBACK = 'direct-fallback'


@dataclass(frozen=True)
class ExecutionPlan:
    decision: ExecutionDecision
    argv: tuple[str, ...]

    @property
    def escalated(self) -> bool:
        return self.decision is ExecutionDecision.ESCALATED


def find_helper(settings: WrapperSettings, which: Which = shutil.which) -> str | None:
    """Look the helper up on the search path. Never spawns anything."""
    return which(settings.helper, path=settings.search_path)


def decide(settings: WrapperSettings, which: Which = shutil.which) -> ExecutionDecision:
    if settings.escalation_disabled:
        return ExecutionDecision.DIRECT
    if find_helper(settings, which) is not None:
        return ExecutionDecision.ESCALATED
    return ExecutionDecision.DIRECT_FALLBACK


def build_argv(decision: ExecutionDecision, command: Sequence[str], settings: WrapperSettings) -> list[str]:
    """Prefix the helper for an escalated run; the command itself is never altered."""
    cmd_list = list(command)
    if decision is ExecutionDecision.ESCALATED:
        return [settings.helper, settings.preserve_env_flag] + cmd_list
    return cmd_list


def plan_execution(command: Sequence[str], settings: WrapperSettings, which: Which = shutil.which) -> ExecutionPlan:
    decision = decide(settings, which)
    if decision is ExecutionDecision.DIRECT_FALLBACK:
        logger.debug("escalation helper %r not found on PATH, running directly", settings.helper)
    argv = build_argv(decision, command, settings)
    logger.debug("decision=%s argv=%s", decision.value, render_command(argv))
    return ExecutionPlan(decision=decision, argv=tuple(argv))


def render_command(argv: Sequence[str]) -> str:
    """Return a shell-safe string representation of the command for logging."""
    return ' '.join(shlex.quote(p) for p in argv)
