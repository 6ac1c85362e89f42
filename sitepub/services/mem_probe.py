"""
Peak memory sampler.
"""
import threading
from typing import Tuple

import psutil

from ..utils.file_utils import size_in_mb


class MemProbe:
    """Samples this process's resident set size on a background thread.

    Args:
        interval: Seconds between samples

    Example:
        >>> probe = MemProbe()
        >>> ...  # do work
        >>> peak_mb, samples = probe.join_and_get_mb_sample()
    """

    def __init__(self, interval: float = 0.05):
        self.interval = interval
        self._process = psutil.Process()
        self._stop = threading.Event()
        self._peak = 0
        self._samples = 0
        self._thread = threading.Thread(target=self._run, name="mem-probe", daemon=True)
        self._thread.start()

    def _run(self):
        while True:
            self._samples += 1
            rss = self._process.memory_info().rss
            if rss > self._peak:
                self._peak = rss
            if self._stop.wait(self.interval):
                return

    def join_and_get_mb_sample(self) -> Tuple[float, int]:
        """Stop sampling.

        Returns:
            Tuple of (peak resident memory in MB, number of samples taken)
        """
        self._stop.set()
        self._thread.join()
        return size_in_mb(self._peak), self._samples
