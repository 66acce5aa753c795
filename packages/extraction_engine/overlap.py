from typing import List, Tuple


class OverlapTracker:
    """Character ranges already claimed during one multi-match extraction.

    Ranges are half-open ``[start, end)``. A candidate overlaps when it
    shares at least one character with a claimed range, which also covers a
    candidate that fully contains an earlier claim.
    """

    def __init__(self):
        self.ranges: List[Tuple[int, int]] = []

    def is_overlapping(self, start: int, end: int) -> bool:
        return any(start < claimed_end and claimed_start < end for claimed_start, claimed_end in self.ranges)

    def claim(self, start: int, end: int) -> bool:
        """Claim a range. Returns False (and claims nothing) on overlap."""
        if self.is_overlapping(start, end):
            return False
        self.ranges.append((start, end))
        return True
