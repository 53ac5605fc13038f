"""
Watch mode.

Two watchdog observers report debounced batches of changed files for the
content and template directories. Batches and the shutdown request all go
through one queue, and are handled one at a time by ``Watcher.loop``.
"""

import os
import queue
import signal
import threading
from typing import Callable, Dict, List, Optional, Tuple

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .exceptions import MarkdownProtocolError

CONTENT = 'content'
TEMPLATE = 'template'
SHUTDOWN = 'shutdown'

Message = Tuple[str, List[str]]


class DebouncedHandler(FileSystemEventHandler):
    """Collect changed file paths and post them once no change arrived for ``debounce`` seconds."""

    EVENT_TYPES = ('created', 'modified', 'moved')

    def __init__(self, source: str, events: 'queue.SimpleQueue[Message]', debounce: float = 0.5):
        super().__init__()
        self.source = source
        self.events = events
        self.debounce = debounce
        self._pending: Dict[str, None] = {}
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    def on_any_event(self, event):
        if event.is_directory or event.event_type not in self.EVENT_TYPES:
            return

        path = event.dest_path if event.event_type == 'moved' else event.src_path
        if isinstance(path, bytes):
            path = os.fsdecode(path)

        with self._lock:
            self._pending[path] = None
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.debounce, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        with self._lock:
            paths = [path for path in self._pending if os.path.isfile(path)]
            self._pending.clear()
            self._timer = None

        if paths:
            self.events.put((self.source, paths))

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending.clear()


class Watcher:
    def __init__(self, platemaker, debounce: float = 0.5, events: 'queue.SimpleQueue[Message]' = None):
        self.platemaker = platemaker
        self.debounce = debounce
        # Signal handlers put on this queue; SimpleQueue.put is reentrant
        self.events = events if events is not None else queue.SimpleQueue()
        self.logger = platemaker.logger.getChild('Watch')
        self.handlers: List[DebouncedHandler] = []

    def request_shutdown(self, *args) -> None:
        self.events.put((SHUTDOWN, []))

    def start_observer(self) -> Observer:
        observer = Observer()
        for source, directory in (
            (CONTENT, self.platemaker.config.content_dir),
            (TEMPLATE, self.platemaker.config.templates_dir),
        ):
            handler = DebouncedHandler(source, self.events, self.debounce)
            observer.schedule(handler, directory, recursive=True)
            self.handlers.append(handler)
            self.logger.info(f"Watching {directory}")
        observer.start()
        return observer

    def handle(self, source: str, paths: List[str]) -> None:
        """Handle one batch. Build errors are logged and do not stop watching."""
        self.logger.info(f"Detected changes in {len(paths)} {source} files")
        tasks: Dict[str, Callable] = {
            CONTENT: self.platemaker.build_files,
            TEMPLATE: self.platemaker.update_template_files,
        }
        try:
            tasks[source](paths)
        except MarkdownProtocolError:
            raise
        except Exception as e:
            self.logger.error(f"Error while handling {source} changes: {e}")

    def loop(self) -> None:
        while True:
            try:
                source, paths = self.events.get(timeout=1.0)
            except queue.Empty:
                continue
            if source == SHUTDOWN:
                self.logger.info("Stopping watch mode")
                return
            self.handle(source, paths)

    def run(self, build_first: bool = False) -> None:
        if build_first:
            try:
                self.platemaker.full_build()
            except MarkdownProtocolError:
                raise
            except Exception as e:
                self.logger.error(f"Initial build failed: {e}")

        observer = self.start_observer()

        previous_handler = None
        if threading.current_thread() is threading.main_thread():
            previous_handler = signal.signal(signal.SIGINT, self.request_shutdown)

        self.logger.info("Press Ctrl+C to stop")
        try:
            self.loop()
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGINT, previous_handler)
            observer.stop()
            observer.join()
            for handler in self.handlers:
                handler.cancel()
