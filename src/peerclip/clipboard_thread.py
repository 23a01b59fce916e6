#!/usr/bin/env python3
"""Dedicated execution context for clipboard access.

Platform clipboards are not safe to use from arbitrary threads: an X11
display connection must stay on the thread that services its events,
and the Windows clipboard wants a single apartment thread. All clipboard
work is therefore marshaled onto one long-lived thread. Callers submit a
job and wait for its Future; the job's exception, if any, is re-raised in
the caller.

A backend may register an idle hook which the thread runs whenever no
job is queued (and after every job), for example to answer selection
requests while this process owns the X11 clipboard.
"""

from __future__ import annotations

import logging
import queue
import threading
from concurrent.futures import Future
from typing import Any, Callable

from peerclip.errors import ClipboardAccessError

logger = logging.getLogger(__name__)

# Seconds the thread waits for a job before running the idle hook again.
IDLE_INTERVAL: float = 0.05

# Seconds stop() waits for the thread to finish.
STOP_TIMEOUT: float = 2.0

_Job = tuple["Future[Any]", Callable[..., Any], tuple[Any, ...]]


class ClipboardThread:
    """Single worker thread that owns all clipboard calls."""

    def __init__(
        self,
        name: str = "clipboard",
        idle: Callable[[], None] | None = None,
        idle_interval: float = IDLE_INTERVAL,
    ) -> None:
        self._name = name
        self._idle = idle
        self._idle_interval = idle_interval
        self._jobs: queue.Queue[_Job | None] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._stopping = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        """True while the worker thread is alive and accepting jobs."""
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stopping.is_set()
        )

    def start(self) -> None:
        """Start the worker thread. Calling it twice is a no-op."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._run, name=self._name, daemon=True
        )
        self._thread.start()

    def submit(self, fn: Callable[..., Any], *args: Any) -> Future[Any]:
        """Queue fn(*args) for the worker thread.

        Args:
            fn: Callable to run on the clipboard thread.
            *args: Positional arguments for fn.

        Returns:
            Future resolved with fn's result or exception.

        Raises:
            ClipboardAccessError: If the thread is not running.
        """
        future: Future[Any] = Future()
        # Checked and queued under the lock so stop cannot slip in between
        with self._lock:
            if not self.running:
                raise ClipboardAccessError("Clipboard thread is not running")
            self._jobs.put((future, fn, args))
        return future

    def call(self, fn: Callable[..., Any], *args: Any, timeout: float | None = None) -> Any:
        """Run fn(*args) on the worker thread and block until it finishes.

        Calls made from the worker thread itself run inline.

        Raises:
            Whatever fn raised, or concurrent.futures.TimeoutError.
        """
        if threading.current_thread() is self._thread:
            return fn(*args)
        return self.submit(fn, *args).result(timeout)

    def stop(self, timeout: float = STOP_TIMEOUT) -> None:
        """Stop accepting jobs, fail queued ones and join the thread."""
        with self._lock:
            if self._thread is None or self._stopping.is_set():
                return
            self._stopping.set()
            self._jobs.put(None)
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)

    def _run(self) -> None:
        wait = self._idle_interval if self._idle is not None else None
        while True:
            try:
                item = self._jobs.get(timeout=wait)
            except queue.Empty:
                self._run_idle()
                continue
            if item is None:
                break
            self._execute(item)
            self._run_idle()
        self._fail_pending()

    def _execute(self, item: _Job) -> None:
        future, fn, args = item
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except Exception as e:
            future.set_exception(e)
        else:
            future.set_result(result)

    def _run_idle(self) -> None:
        if self._idle is None:
            return
        try:
            self._idle()
        except Exception:
            logger.exception("Clipboard idle hook failed")

    def _fail_pending(self) -> None:
        while True:
            try:
                item = self._jobs.get_nowait()
            except queue.Empty:
                return
            if item is None:
                continue
            future = item[0]
            if future.set_running_or_notify_cancel():
                future.set_exception(ClipboardAccessError("Clipboard thread stopped"))
