"""
Inbox watcher for auto-regenerating documentation.

Watches the inbox for changes to supported files and triggers a full
regeneration once the changes settle.
"""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

if TYPE_CHECKING:
    from typing import Any, Callable, Iterable

    from program_docs.builder import DocumentationBuilder

logger = logging.getLogger(__name__)

# Quiet period after the last change before regenerating
DEBOUNCE_SECONDS = 1.0

# Reading sources during a run raises opened/closed events; only these mean a change
CHANGE_EVENTS = frozenset({"created", "modified", "deleted", "moved"})


class Debouncer:
    """
    Single-slot debounced task.

    Each trigger restarts the timer; the callback runs once the triggers
    stop for `wait` seconds. The callback never overlaps itself: a trigger
    that fires during a run schedules exactly one follow-up run.
    """

    def __init__(self, callback: Callable[[], None], wait: float = DEBOUNCE_SECONDS) -> None:
        self.callback = callback
        self.wait = wait
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._busy = False
        self._rerun = False
        self._closed = False

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None or self._rerun

    def trigger(self) -> None:
        """Schedule the callback, restarting the quiet period."""
        with self._lock:
            if self._closed:
                return
            self._restart_timer()

    def _restart_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        self._timer = threading.Timer(self.wait, self._fire)
        self._timer.daemon = True
        self._timer.start()

    def _fire(self) -> None:
        with self._lock:
            self._timer = None
            if self._closed:
                return
            if self._busy:
                self._rerun = True
                return
            self._busy = True

        try:
            self.callback()
        except Exception:
            logger.exception("Regeneration failed")
        finally:
            with self._lock:
                self._busy = False
                if self._rerun and not self._closed:
                    self._rerun = False
                    self._restart_timer()

    def cancel(self) -> None:
        """Drop any scheduled run. An in-flight run is left to finish."""
        with self._lock:
            self._closed = True
            self._rerun = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class ProgramChangeHandler(FileSystemEventHandler):
    """Handler for file system events that triggers doc regeneration."""

    def __init__(self, debouncer: Debouncer, extensions: Iterable[str]) -> None:
        """
        Initialize the handler.

        Args:
            debouncer: Debouncer to trigger on relevant changes.
            extensions: Supported extensions (e.g., {".m", ".pdf"}).
        """
        super().__init__()
        self.debouncer = debouncer
        self.extensions = {ext.lower() for ext in extensions}

    def is_relevant(self, path: str | bytes | None) -> bool:
        if not path:
            return False
        if isinstance(path, bytes):
            path = path.decode(errors="replace")
        return Path(path).suffix.lower() in self.extensions

    def on_any_event(self, event: Any) -> None:
        """Forward changes to supported files to the debouncer."""
        if event.is_directory or event.event_type not in CHANGE_EVENTS:
            return

        paths = [event.src_path, getattr(event, "dest_path", None)]
        relevant = next((p for p in paths if self.is_relevant(p)), None)
        if relevant is None:
            return

        logger.info("Change: %s (%s)", relevant, event.event_type)
        print(f"📄 Change: {Path(str(relevant)).name}", flush=True)
        self.debouncer.trigger()


def watch(
    builder: DocumentationBuilder,
    on_run: Callable[[], None],
    stop_event: threading.Event | None = None,
    poll_interval: float = 0.5,
) -> bool:
    """
    Run once, then regenerate whenever supported inbox files change.

    Args:
        builder: Builder whose settings name the inbox to watch.
        on_run: Callback performing one generation pass.
        stop_event: Optional event that ends the watch when set.
        poll_interval: How often to check the stop event.

    Returns:
        False if the inbox is missing and nothing was watched, else True.
    """
    inbox = builder.settings.inbox_dir
    if not inbox.is_dir():
        return False

    on_run()

    def regenerate() -> None:
        print("\n🔄 Changes detected, regenerating...\n", flush=True)
        on_run()
        print("👀 Watching for changes...\n", flush=True)

    debouncer = Debouncer(regenerate)
    handler = ProgramChangeHandler(debouncer, builder.supported_extensions)

    observer = Observer()
    observer.schedule(handler, str(inbox), recursive=builder.settings.recursive)
    observer.start()

    print(f"   Watching: {inbox}/", flush=True)
    print("\nPress Ctrl+C to stop.\n", flush=True)

    stop_event = stop_event or threading.Event()
    try:
        while not stop_event.is_set():
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        print("\n\n👋 Stopping watch mode...", flush=True)
    finally:
        debouncer.cancel()
        observer.stop()
        observer.join()

    return True
