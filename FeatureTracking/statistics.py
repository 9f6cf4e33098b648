"""
Observability sinks for tracker counters.

The matcher reports samples to a sink passed in by the caller instead of a
global statistics registry, so tests can assert on exact counter values.
"""

import numpy as np
import pandas as pd
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, List

from .logger import get_logger

MATCH_BITS_STAT = "GyroTracker match bits"
NO_MATCH_NUM_CHECKED_STAT = "GyroTracker no-match num_checked"

logger = get_logger("statistics")


class StatisticsSink(ABC):
    """Receives named samples from the tracker"""

    @abstractmethod
    def add_sample(self, name: str, value: float):
        pass


class NullStatistics(StatisticsSink):
    """Sink that drops every sample"""

    def add_sample(self, name: str, value: float):
        pass


class StatsCollector(StatisticsSink):
    """
    In-memory sample distributions keyed by counter name

    Usage:
        stats = StatsCollector()
        tracker = GyroTracker(camera, statistics=stats)
        tracker.track(q, frame_k, frame_kp1)
        print(stats.summary())
    """

    def __init__(self):
        self._samples: Dict[str, List[float]] = defaultdict(list)

    def add_sample(self, name: str, value: float):
        self._samples[name].append(float(value))

    def samples(self, name: str) -> List[float]:
        return list(self._samples.get(name, []))

    def count(self, name: str) -> int:
        return len(self._samples.get(name, []))

    def names(self) -> List[str]:
        return sorted(self._samples.keys())

    def reset(self):
        self._samples.clear()

    def summary(self) -> pd.DataFrame:
        """
        Per-counter summary

        Returns:
            DataFrame indexed by counter name with count, mean, std, min, max
        """
        rows = []
        for name in self.names():
            values = np.asarray(self._samples[name])
            rows.append({
                'name': name,
                'count': int(values.size),
                'mean': float(values.mean()),
                'std': float(values.std()),
                'min': float(values.min()),
                'max': float(values.max())
            })
        columns = ['name', 'count', 'mean', 'std', 'min', 'max']
        return pd.DataFrame(rows, columns=columns).set_index('name')

    def log_summary(self):
        summary = self.summary()
        if summary.empty:
            logger.info("No statistics collected")
            return
        logger.info(f"Tracker statistics:\n{summary.to_string(float_format=lambda v: f'{v:.2f}')}")
