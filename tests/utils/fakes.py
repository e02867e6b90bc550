"""
Fakes for RuntimeBuilder collaborators.
"""

import threading
from pathlib import Path
from typing import List, Optional, Tuple


class RecordingProgress:
    """Progress handler that records every (stage, fraction) pair."""

    def __init__(self):
        self.events: List[Tuple] = []
        self._lock = threading.Lock()

    def __call__(self, stage, fraction):
        with self._lock:
            self.events.append((stage, fraction))

    @property
    def stages(self):
        seen = []
        for stage, _ in self.events:
            if not seen or seen[-1] is not stage:
                seen.append(stage)
        return seen


class CountingInitializer:
    """Runtime initializer that counts calls and returns a fresh handle."""

    def __init__(self, error: Optional[Exception] = None, delay: float = 0.0):
        self.calls = []
        self.error = error
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, install_dir: Path, args, settings):
        with self._lock:
            self.calls.append((install_dir, list(args), settings))
        if self.delay:
            threading.Event().wait(self.delay)
        if self.error is not None:
            raise self.error
        return object()


class FakeDownloader:
    """Downloader that writes fixed bytes instead of using the network."""

    def __init__(self, payload: bytes, fractions=(0.25, 0.5, 1.0)):
        self.payload = payload
        self.fractions = fractions
        self.calls = []
        self._lock = threading.Lock()

    def download(self, build_info, platform, destination, progress_callback=None):
        with self._lock:
            self.calls.append((build_info, platform, destination))
        for fraction in self.fractions:
            if progress_callback:
                progress_callback(fraction)
        Path(destination).write_bytes(self.payload)
        return Path(destination)
