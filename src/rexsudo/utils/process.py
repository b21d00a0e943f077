"""Hand control over to the planned command.

On POSIX the wrapper's own process image is replaced, so the command's exit
status is the wrapper's exit status with no translation. Windows has no real
exec (os.execvp there starts a new process and exits immediately), so the
command is spawned instead and its status is returned for the caller to exit
with.
"""
from __future__ import annotations

import errno
import logging
import os
import signal
import subprocess
from collections.abc import Sequence
from typing import NoReturn

from .logging_config import flush_handlers

logger = logging.getLogger(__name__)

EXIT_NOT_FOUND = 127
EXIT_CANNOT_EXECUTE = 126

# ignored by the interpreter at startup; an ignored disposition survives exec
INHERITED_IGNORES = tuple(
    getattr(signal, name) for name in ('SIGPIPE', 'SIGXFSZ') if hasattr(signal, name)
)


def has_exec() -> bool:
    return os.name == 'posix'


def restore_default_signals() -> dict[int, object]:
    """Put SIGPIPE and SIGXFSZ back to SIG_DFL, returning the previous handlers."""
    previous = {}
    for signum in INHERITED_IGNORES:
        previous[signum] = signal.signal(signum, signal.SIG_DFL)
    return previous


def replace_process(argv: Sequence[str]) -> NoReturn:
    """Replace the current process with ``argv``, searching PATH for argv[0].

    Raises FileNotFoundError for an empty argv, otherwise whatever OSError
    os.execvp raises.
    """
    args = list(argv)
    if not args or not args[0]:
        raise FileNotFoundError(errno.ENOENT, 'no command specified', args[0] if args else '')
    logger.debug("replacing process image with %s", args[0])
    flush_handlers()
    previous = restore_default_signals()
    try:
        os.execvp(args[0], args)
    except OSError:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
        raise


def run_and_wait(argv: Sequence[str]) -> int:
    """Run ``argv`` as a child sharing our stdio and return its exit status.

    Interrupts are delivered to the child through the shared console; the
    parent keeps waiting until the child is gone.
    """
    proc = subprocess.Popen(list(argv))
    while True:
        try:
            code = proc.wait()
        except KeyboardInterrupt:
            continue
        break
    logger.debug("child %s exited with %s", proc.pid, code)
    if code < 0:
        # killed by signal, report it the way a shell would
        return 128 + abs(code)
    return code


def exit_status_for_error(exc: OSError) -> int:
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return EXIT_NOT_FOUND
    return EXIT_CANNOT_EXECUTE


def format_exec_error(exc: OSError, argv: Sequence[str]) -> str:
    name = argv[0] if argv else ''
    reason = exc.strerror or str(exc)
    return f"{name}: {reason}" if name else reason

