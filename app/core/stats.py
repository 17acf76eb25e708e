import math
from typing import Dict, Iterable, List, Sequence


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def nearest_rank(sorted_values: Sequence[float], fraction: float) -> float:
    """
    Zero-indexed nearest-rank percentile: sorted_values[floor(n * fraction)].
    No interpolation. The index is clamped to the last element.
    """
    if not sorted_values:
        return 0.0
    index = min(int(math.floor(len(sorted_values) * fraction)), len(sorted_values) - 1)
    return sorted_values[index]


def histogram(values: Iterable[int]) -> Dict[int, int]:
    """Count per distinct value, keys ascending."""
    counts: Dict[int, int] = {}
    for v in values:
        counts[v] = counts.get(v, 0) + 1
    return dict(sorted(counts.items()))


def probability_within(values: List[float], limit: float) -> float:
    """Share of values that are <= limit."""
    if not values:
        return 0.0
    return sum(1 for v in values if v <= limit) / len(values)
