from __future__ import annotations

import logging
import subprocess
import threading
from typing import IO, List, Optional

from .argbuilder import build_args, effective_binary
from .lib.command import describe_returncode, format_argv
from .output_log import OutputLog
from .params import DEFAULT_BINARY, ParameterSet

logger = logging.getLogger(__name__)

# How long to wait for the readers once the child has exited. A grandchild
# that inherited the pipes can keep them open indefinitely.
READER_DRAIN_TIMEOUT_S = 5.0


class RunGate:
    """Single-flight flag: idle -> running -> idle."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._running = False

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def try_acquire(self) -> bool:
        """Switch to running; False if a run already holds the gate."""

        with self._lock:
            if self._running:
                return False
            self._running = True
            return True

    def release(self) -> None:
        with self._lock:
            self._running = False


class ProcessSupervisor:
    """Runs the load-testing binary in the background, one run at a time.

    ``launch()`` returns immediately; progress is observed by polling
    ``output.snapshot()`` and ``is_running``. There is no way to stop a run
    from here: it lasts until the child exits on its own or is killed.
    """

    def __init__(self, output: Optional[OutputLog] = None, gate: Optional[RunGate] = None) -> None:
        self.output = output if output is not None else OutputLog()
        self.gate = gate if gate is not None else RunGate()
        self.last_returncode: Optional[int] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return self.gate.is_running

    def launch(self, params: ParameterSet) -> bool:
        if not self.gate.try_acquire():
            logger.debug("Launch ignored: a run is already in progress")
            return False

        try:
            binary = effective_binary(params)
            args = build_args(params)
            argv = [binary, *args]

            generation = self.output.clear()
            self.output.append(f"$ {format_argv(argv)}", generation)
            self.last_returncode = None
            logger.info("CMD %s", format_argv(argv))

            thread = threading.Thread(
                target=self._run,
                args=(argv, generation),
                name="slowhttp-supervisor",
                daemon=True,
            )
            self._thread = thread
            thread.start()
        except BaseException:
            self.gate.release()
            raise
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current run has finished; False on timeout."""

        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run(self, argv: List[str], generation: int) -> None:
        try:
            self._supervise(argv, generation)
        except Exception as e:  # noqa: BLE001
            logger.exception("Supervisor failed")
            self.output.append(f"[ERROR] {e}", generation)
        finally:
            self.gate.release()

    def _supervise(self, argv: List[str], generation: int) -> None:
        binary = argv[0]
        try:
            proc = subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except (OSError, ValueError) as e:
            logger.warning("Failed to start %s: %s", binary, e)
            self.output.extend(
                [
                    f"[ERROR] Failed to start '{binary}': {e}",
                    f"  Make sure {DEFAULT_BINARY} is installed and in your PATH,",
                    "  or set a custom binary path.",
                ],
                generation,
            )
            return

        readers = [
            threading.Thread(
                target=self._pump,
                args=(stream, name, generation),
                name=f"slowhttp-{name}",
                daemon=True,
            )
            for stream, name in ((proc.stdout, "stdout"), (proc.stderr, "stderr"))
        ]
        for reader in readers:
            reader.start()

        try:
            returncode = proc.wait()
        except OSError as e:
            logger.warning("Wait on pid %s failed: %s", proc.pid, e)
            self._drain(readers)
            self.output.extend(["", f"[Wait error: {e}]"], generation)
            return

        self._drain(readers)
        self.last_returncode = returncode
        logger.info("Process %s exited (%s)", proc.pid, describe_returncode(returncode))
        self.output.extend(["", f"[Process exited with {describe_returncode(returncode)}]"], generation)

    def _drain(self, readers: List[threading.Thread]) -> None:
        for reader in readers:
            reader.join(READER_DRAIN_TIMEOUT_S)
            if reader.is_alive():
                logger.warning("%s still open after exit; not waiting for it", reader.name)

    def _pump(self, stream: Optional[IO[bytes]], name: str, generation: int) -> None:
        if stream is None:
            return
        try:
            with stream:
                for raw in iter(stream.readline, b""):
                    line = raw.decode("utf-8", errors="replace").rstrip("\r\n")
                    if not self.output.append(line, generation):
                        # A newer run owns the log now.
                        logger.debug("%s reader dropped output from a finished run", name)
                        return
        except (OSError, ValueError) as e:
            logger.debug("%s reader stopped: %s", name, e)
