from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Tuple

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"
FALLBACK_LOG_NAME = "slowhttp-launcher.log"

_GUARD = "_slowhttp_log_path"


def _open_log_file(log_path: str) -> Tuple[logging.Handler, str]:
    p = Path(log_path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(p), str(p)
    except OSError:
        fallback = Path.cwd() / FALLBACK_LOG_NAME
        return logging.FileHandler(fallback), str(fallback)


def configure_logging(
    log_path: Optional[str] = None,
    *,
    verbose: bool = False,
    console: bool = True,
) -> Optional[str]:
    """Set up launcher logging for ``--log`` / ``--verbose``.

    Only launcher decisions are logged; child output stays in the OutputLog.
    Quiet (WARNING) by default. Configures the root logger once; later calls
    only adjust the level. Returns the log file in use, if any.
    """

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if hasattr(root, _GUARD):
        return getattr(root, _GUARD)

    handlers: list[logging.Handler] = []
    chosen: Optional[str] = None
    if log_path:
        file_handler, chosen = _open_log_file(log_path)
        handlers.append(file_handler)
    if console:
        handlers.append(logging.StreamHandler())

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for h in handlers:
        h.setFormatter(fmt)
        root.addHandler(h)

    setattr(root, _GUARD, chosen)
    if chosen and chosen != str(Path(log_path)):
        logging.getLogger(__name__).warning("Cannot write %s; logging to %s", log_path, chosen)
    return chosen
