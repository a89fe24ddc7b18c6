"""slowhttp-launcher: run slowhttptest from a parameter set.

Core pieces:
- ParameterSet: every user-editable value, kept as text
- build_args / build_command_preview: parameters -> argv
- ProcessSupervisor: single-flight launch with live stdout/stderr capture
- OutputLog: thread-safe ordered log the display layer polls
"""

from __future__ import annotations

from .argbuilder import build_args, build_command_preview, effective_binary
from .output_log import OutputLog
from .params import ParameterSet, ProxyMode, TestMode
from .supervisor import ProcessSupervisor, RunGate

__all__ = [
    "OutputLog",
    "ParameterSet",
    "ProcessSupervisor",
    "ProxyMode",
    "RunGate",
    "TestMode",
    "build_args",
    "build_command_preview",
    "effective_binary",
]
