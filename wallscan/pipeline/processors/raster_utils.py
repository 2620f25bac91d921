"""
Shared raster utilities for pipeline processors.

Run detection over one row or column of the binary mask, used by both
CALIBRATE_SCALE and SCAN_SEGMENTS.
"""

from typing import List, Tuple

import numpy as np


def find_dark_runs(line: np.ndarray) -> List[Tuple[int, int]]:
    """
    Return (start, end) of every contiguous dark run in a 1-D boolean line.

    end is exclusive. A run touching either end of the line is closed at the
    line boundary.
    """
    if line.size == 0:
        return []
    padded = np.concatenate(([False], line.astype(bool), [False])).astype(np.int8)
    edges = np.diff(padded)
    starts = np.flatnonzero(edges == 1)
    ends = np.flatnonzero(edges == -1)
    return [(int(s), int(e)) for s, e in zip(starts, ends)]
