import logging
from typing import Any, Iterable, List, Optional

logger = logging.getLogger(__name__)

DONE_STATUS = "Done"


def _field(obj: Any, name: str, default: Any = None) -> Any:
    # Support dicts and objects
    if isinstance(obj, dict):
        return obj.get(name, default)
    return getattr(obj, name, default)


def _title_of(ref: Any) -> Any:
    """Group members may be plain titles or slice-like objects."""
    if isinstance(ref, str):
        return ref
    return _field(ref, 'title')


def find_group_slices(slices: List[Any], group: Any, include_done: bool) -> List[Any]:
    """
    Resolves a group's titles against the backlog.
    Titles without a matching slice are dropped; Done slices are dropped unless include_done.
    """
    resolved = []
    for ref in _field(group, 'slices') or []:
        title = _title_of(ref)
        match = next((s for s in slices if _field(s, 'title') == title), None)
        if match is None:
            continue
        if not include_done and _field(match, 'status') == DONE_STATUS:
            continue
        resolved.append(match)
    return resolved


def calculate_risk(slices: Optional[List[Any]], groups: Optional[Iterable[Any]], include_done: bool) -> float:
    """
    Overall backlog risk: sum over groups of (resolved member count * group risk),
    divided by the full backlog size.

    Groups without risk, without slices, or flagged `exclude` contribute nothing.
    The denominator is always len(slices), even when Done slices are left out of
    the numerator. The result is not clamped; overlapping groups or a group risk
    above 1 can push it past 1.
    """
    if not slices:
        return 0.0

    total_contribution = 0.0
    for group in groups or []:
        group_risk = _field(group, 'risk')
        members = _field(group, 'slices')
        if group_risk is None or not isinstance(members, list) or not members or _field(group, 'exclude'):
            continue

        matched = find_group_slices(slices, group, include_done)
        contribution = len(matched) * group_risk
        logger.debug(
            "[RISK] group=%s matched=%d risk=%s contribution=%s",
            _field(group, 'name'), len(matched), group_risk, contribution,
        )
        total_contribution += contribution

    return total_contribution / len(slices)
