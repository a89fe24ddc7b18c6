from __future__ import annotations

import shlex
import signal
from typing import Sequence


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def describe_returncode(returncode: int) -> str:
    """Describe a Popen return code the way a shell reports it.

    Negative codes mean the child was killed by a signal (POSIX only).
    """

    if returncode >= 0:
        return f"exit status: {returncode}"

    signum = -returncode
    try:
        name = signal.Signals(signum).name
    except ValueError:
        return f"signal: {signum}"
    return f"signal: {signum} ({name})"
