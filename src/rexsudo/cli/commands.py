from __future__ import annotations

import logging

import click

from rexsudo.config import load_settings
from rexsudo.utils.logging_config import setup_logging, setup_wrapper_logging
from rexsudo.utils.privilege import plan_execution
from rexsudo.utils.process import (
    exit_status_for_error,
    format_exec_error,
    has_exec,
    replace_process,
    run_and_wait,
)

logger = logging.getLogger(__name__)


class PassthroughCommand(click.Command):
    """A command that owns no options: every token, even --help or --, is an argument."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        return super().parse_args(ctx, ['--', *args])


@click.command(cls=PassthroughCommand, context_settings={'help_option_names': []})
@click.argument('command', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli(ctx: click.Context, command: tuple[str, ...]):
    """Run COMMAND through sudo -E unless REX_DISABLE_SUDO=1 or sudo is missing."""
    settings = load_settings()
    try:
        setup_wrapper_logging(settings.log_level)
    except ValueError:
        setup_logging()
        logger.warning("unknown log level %r, using WARNING", settings.log_level)

    plan = plan_execution(command, settings)
    if plan.escalated:
        logger.debug("escalating through %s", settings.helper)
    try:
        if has_exec():
            replace_process(plan.argv)
        ctx.exit(run_and_wait(plan.argv))
    except OSError as e:
        click.echo(f"run-with-sudo: {format_exec_error(e, plan.argv)}", err=True)
        ctx.exit(exit_status_for_error(e))


def main():
    cli(prog_name='run-with-sudo')
