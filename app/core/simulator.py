import math
import logging
import random
from datetime import date
from typing import List, Optional, Protocol, Sequence, Tuple

from app.config import MAX_SIMULATED_WEEKS
from app.core import stats
from app.core.dates import calculate_delivery_date, days_between
from app.models.simulation import SimulationParameters, SimulationResult, CompletionRow

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
P90_FRACTION = 0.9


class RandomSource(Protocol):
    """The subset of random.Random the simulation draws from."""

    def random(self) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def uniform(self, a: float, b: float) -> float: ...

    def choice(self, seq: Sequence[float]) -> float: ...


# ------------------------------------------------------
# Per-trial sampling
# ------------------------------------------------------

def _sample_total_work(params: SimulationParameters, rng: RandomSource) -> float:
    """Random scope count times a random split factor. Fractional totals are allowed."""
    slice_count = rng.randint(params.sliceCountMin, params.sliceCountMax)
    split_factor = rng.uniform(params.splitFactorMin, params.splitFactorMax)
    return slice_count * split_factor


def _sample_weekly_throughput(params: SimulationParameters, rng: RandomSource) -> float:
    """
    One week of raw throughput: a historical sample if any, else a draw from
    [throughputMin, throughputMax], else throughputMin as a constant.
    """
    if params.throughputValues:
        return rng.choice(params.throughputValues)
    if params.throughputMax is not None:
        return rng.uniform(params.throughputMin, params.throughputMax)
    return params.throughputMin


def _apply_reduction(throughput: float, params: SimulationParameters, rng: RandomSource) -> float:
    """
    Discounts a week's throughput by a random share in [0, uncertainty + risk).
    The share is clamped to [0, 1] and the result to >= 0, so a week can deliver
    nothing but never takes work back.
    """
    spread = params.uncertaintyFactor + params.effective_risk
    reduction = min(max(rng.random() * spread, 0.0), 1.0)
    return max(0.0, throughput * (1.0 - reduction))


def can_make_progress(params: SimulationParameters) -> bool:
    """True if at least some weeks can draw a positive throughput."""
    if params.throughputValues:
        return any(v > 0 for v in params.throughputValues)
    if params.throughputMax is not None:
        return max(params.throughputMin, params.throughputMax) > 0
    return params.throughputMin > 0


def _simulate_trial(params: SimulationParameters, rng: RandomSource, stalled: bool = False) -> Tuple[int, bool]:
    """
    Runs one project to completion. Returns (duration_days, capped).
    A stalled trial (no positive throughput can ever be drawn) with work left
    is reported as MAX_SIMULATED_WEEKS long.
    """
    remaining = _sample_total_work(params, rng)
    weeks = 0

    if stalled and remaining > 0:
        return math.ceil(MAX_SIMULATED_WEEKS * DAYS_PER_WEEK), True

    while remaining > 0:
        weekly = _apply_reduction(_sample_weekly_throughput(params, rng), params, rng)
        remaining -= math.ceil(weekly)
        weeks += 1

    return math.ceil(weeks * DAYS_PER_WEEK), False


# ------------------------------------------------------
# Public entry point
# ------------------------------------------------------

def simulate(params: SimulationParameters, rng: Optional[RandomSource] = None) -> SimulationResult:
    """
    Monte Carlo throughput forecast.

    Runs `params.iterations` independent trials, each burning a random scope
    down week by week with randomised, risk-discounted throughput, and
    aggregates the trial durations (in days) into the chance of meeting the
    deadline, mean and nearest-rank P90, projected dates and a histogram.

    `rng` defaults to a fresh entropy-seeded random.Random; pass a seeded one
    for repeatable runs. Nothing is shared between calls.
    """
    rng = rng if rng is not None else random.Random()

    stalled = not can_make_progress(params)
    durations: List[int] = []
    capped_trials = 0
    for _ in range(params.iterations):
        duration, capped = _simulate_trial(params, rng, stalled)
        durations.append(duration)
        capped_trials += int(capped)

    if capped_trials:
        logger.warning(
            "[SIMULATE] No positive weekly throughput can be drawn (history=%s, min=%s, max=%s); "
            "%d/%d trials reported as %d weeks.",
            params.throughputValues, params.throughputMin, params.throughputMax,
            capped_trials, params.iterations, MAX_SIMULATED_WEEKS,
        )

    durations.sort()
    deadline_days = days_between(params.startDate, params.deadlineDate)
    probability = stats.probability_within(durations, deadline_days)
    average = stats.mean(durations)
    p90 = stats.nearest_rank(durations, P90_FRACTION)

    logger.info(
        "[SIMULATE] iterations=%d deadlineDays=%d probability=%.3f average=%.2f p90=%s",
        params.iterations, deadline_days, probability, average, p90,
    )

    return SimulationResult(
        probability=probability,
        average=f"{average:.2f}",
        p90=f"{p90:.2f}",
        averageDays=average,
        p90Days=float(p90),
        expectedDate=calculate_delivery_date(params.startDate, average),
        p90Date=calculate_delivery_date(params.startDate, p90),
        durations=durations,
        deadlineDays=deadline_days,
        completionResults=stats.histogram(durations),
        totalSimulations=params.iterations,
    )


def completion_distribution(result: SimulationResult, start_date: date, deadline_date: date) -> List[CompletionRow]:
    """Histogram as table rows with share, running cumulative share and deadline flag."""
    rows = []
    cumulative = 0
    total = result.totalSimulations
    for days in sorted(result.completionResults):
        count = result.completionResults[days]
        cumulative += count
        completion_date = calculate_delivery_date(start_date, days)
        rows.append(CompletionRow(
            days=days,
            weeks=round(days / DAYS_PER_WEEK, 1),
            completionDate=completion_date,
            count=count,
            percentage=round(count / total * 100, 2),
            cumulativePercentage=round(cumulative / total * 100, 2),
            pastDeadline=completion_date > deadline_date,
        ))
    return rows
