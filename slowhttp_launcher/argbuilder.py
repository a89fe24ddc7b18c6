from __future__ import annotations

import re
from typing import List, Optional

from .lib.command import format_argv
from .params import (
    CONNECTION_OPTIONS,
    DEFAULT_BINARY,
    HTTP_OPTIONS,
    MODE_OPTIONS,
    PROBE_INTERVAL,
    STATS_FLAG,
    STATS_PREFIX_FLAG,
    URL_FLAG,
    VERBOSITY,
    NumericOption,
    ParameterSet,
)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def parse_int(text: str) -> Optional[int]:
    """Parse a numeric field, returning None when it is empty or not an integer."""

    s = text.strip()
    if not _INT_RE.fullmatch(s):
        return None
    n = int(s)
    if n < _I64_MIN or n > _I64_MAX:
        return None
    return n


def _push_numeric(args: List[str], params: ParameterSet, opt: NumericOption) -> None:
    n = parse_int(getattr(params, opt.field))
    if n is not None and n != opt.default:
        args += [opt.flag, str(n)]


def _push_text(args: List[str], flag: str, value: str) -> None:
    value = value.strip()
    if value:
        args += [flag, value]


def build_args(params: ParameterSet) -> List[str]:
    """Build the argument vector for one run.

    Order: mode and target, connection tuning, HTTP options, proxy, reporting,
    then the options that only apply to the selected mode. Options left at
    the tool's own default are not passed.
    """

    args = [params.test_mode.flag, URL_FLAG, params.url]

    for opt in CONNECTION_OPTIONS:
        _push_numeric(args, params, opt)

    for text_opt in HTTP_OPTIONS:
        _push_text(args, text_opt.flag, getattr(params, text_opt.field))

    proxy_flag = params.proxy_mode.flag
    if proxy_flag is not None:
        _push_text(args, proxy_flag, params.proxy_addr)

    _push_numeric(args, params, PROBE_INTERVAL)

    if params.generate_stats:
        args.append(STATS_FLAG)
        _push_text(args, STATS_PREFIX_FLAG, params.stats_file_prefix)

    _push_numeric(args, params, VERBOSITY)

    for opt in MODE_OPTIONS[params.test_mode]:
        _push_numeric(args, params, opt)

    return args


def effective_binary(params: ParameterSet) -> str:
    return params.custom_binary_path.strip() or DEFAULT_BINARY


def build_command_preview(params: ParameterSet) -> str:
    return format_argv([effective_binary(params), *build_args(params)])
