"""Per-call registry of external archiver processes.

A save call creates one :class:`ProcessSupervisor` and hands it to every
archive operation it starts.  Each operation registers its process before
awaiting it, so when one archive in a batch fails the engine can terminate
every sibling that is still running.
"""

from __future__ import annotations

import asyncio
from typing import Iterator

import structlog

from buildcache.utils.logging import get_logger


class ProcessSupervisor:
    """Tracks in-flight subprocesses for one save or restore unit of work."""

    def __init__(self) -> None:
        self._processes: list[asyncio.subprocess.Process] = []
        self._logger: structlog.BoundLogger = get_logger(__name__)

    def track(self, process: asyncio.subprocess.Process) -> None:
        self._processes.append(process)

    def kill_all(self) -> list[BaseException]:
        """Request termination of every tracked process that is still running.

        A process that cannot be terminated is logged and skipped; the loop
        always visits every handle.

        Returns
        -------
        list[BaseException]
            The termination failures, one per handle that could not be
            signalled.  Empty when every request went through.
        """
        failures: list[BaseException] = []
        for process in self._processes:
            if process.returncode is not None:
                continue
            try:
                process.terminate()
            except ProcessLookupError:
                # Exited between the returncode check and the signal.
                continue
            except Exception as exc:  # noqa: BLE001
                self._logger.warning(
                    "process_kill_failed",
                    pid=getattr(process, "pid", None),
                    error=str(exc),
                )
                failures.append(exc)
        return failures

    def __len__(self) -> int:
        return len(self._processes)

    def __iter__(self) -> Iterator[asyncio.subprocess.Process]:
        return iter(self._processes)
