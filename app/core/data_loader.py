import json
import logging
from typing import Dict, Any, List, Optional, Tuple, Union

from pydantic import ValidationError

from app.core.risk import calculate_risk
from app.models.slice import Backlog, Slice, SliceStatus
from app.models.simulation import StatusBreakdown

logger = logging.getLogger(__name__)


class BacklogValidationError(ValueError):
    """Uploaded backlog is not usable. The message is meant for the planner."""


def parse_backlog_json(payload: Union[str, bytes, Dict[str, Any]]) -> Backlog:
    """
    Parses an uploaded backlog document ({"slices": [...], "groups": [...], "forecasts": [...]}).
    Raises BacklogValidationError with a readable message instead of letting
    malformed input reach the forecast.
    """
    if isinstance(payload, (str, bytes)):
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise BacklogValidationError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno}).") from e
    else:
        data = payload

    if not isinstance(data, dict) or not isinstance(data.get('slices'), list):
        raise BacklogValidationError("JSON must contain a 'slices' array.")

    for index, s in enumerate(data['slices']):
        if not isinstance(s, dict) or not s.get('title'):
            raise BacklogValidationError(f'Each slice must have a "title" (slice #{index + 1} has none).')

    try:
        return Backlog(**data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get('loc', ()))
        raise BacklogValidationError(f"Invalid backlog field '{location}': {first.get('msg')}") from e


def parse_throughput_values(text: str) -> List[float]:
    """'10, 12, x, 8' -> [10.0, 12.0, 8.0]; unparsable entries are skipped."""
    values = []
    for token in (text or "").split(','):
        try:
            values.append(float(token.strip()))
        except ValueError:
            continue
    return values


def calculate_slice_count_range(slice_count: int) -> Tuple[int, int]:
    """Default scope range for a loaded backlog: exactly the current slice count."""
    return slice_count, slice_count


class BacklogLoader:
    """
    Holds one parsed backlog and derives what the forecast needs from it:
    the candidate slice pool, the aggregated risk and the status overview.
    """

    def __init__(self, backlog: Backlog):
        self.backlog = backlog
        self.slices: List[Slice] = backlog.slices
        self.groups = backlog.groups
        logger.info("[LOAD] Backlog loaded: %d slices | %d groups", len(self.slices), len(self.groups))

    @classmethod
    def from_json(cls, payload: Union[str, bytes, Dict[str, Any]]) -> "BacklogLoader":
        return cls(parse_backlog_json(payload))

    def excluded_titles(self) -> set:
        titles = set()
        for group in self.groups:
            if group.exclude:
                titles.update(group.slices)
        return titles

    def candidate_slices(self, include_done: bool, target_release: Optional[str] = None) -> List[Slice]:
        """
        Slices that should be forecast: members of excluded groups are dropped,
        Done slices are dropped unless include_done, and with a target_release
        only slices in a group tagged with that release are kept.
        """
        excluded = self.excluded_titles()
        release_titles = None
        if target_release is not None:
            release_titles = set()
            for group in self.groups:
                if group.targetRelease == target_release and not group.exclude:
                    release_titles.update(group.slices)

        candidates = []
        for s in self.slices:
            if s.title in excluded:
                continue
            if not include_done and s.is_done:
                continue
            if release_titles is not None and s.title not in release_titles:
                continue
            candidates.append(s)

        logger.debug(
            "[LOAD] Candidates: %d of %d (includeDone=%s, release=%s)",
            len(candidates), len(self.slices), include_done, target_release,
        )
        return candidates

    def slice_count_range(self, include_done: bool, target_release: Optional[str] = None) -> Tuple[int, int]:
        return calculate_slice_count_range(len(self.candidate_slices(include_done, target_release)))

    def risk(self, include_done: bool) -> float:
        return calculate_risk(self.slices, self.groups, include_done)

    def status_breakdown(self) -> StatusBreakdown:
        """Counts by raw status and by display status (unknown statuses under 'Other')."""
        by_status: Dict[str, int] = {}
        by_display: Dict[str, int] = {}
        for s in self.slices:
            by_status[s.status] = by_status.get(s.status, 0) + 1
            by_display[s.display_status] = by_display.get(s.display_status, 0) + 1

        total = len(self.slices)
        done = by_status.get(SliceStatus.DONE.value, 0)
        return StatusBreakdown(
            total=total,
            done=done,
            notDone=total - done,
            completionRate=round(done / total * 100) if total else 0,
            byStatus=by_status,
            byDisplayStatus=by_display,
        )
