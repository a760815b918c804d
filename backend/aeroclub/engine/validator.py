# backend/aeroclub/engine/validator.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List, Optional

from aeroclub.config import BufferPolicy, DEFAULT_POLICY
from aeroclub.engine.availability import next_available_start
from aeroclub.engine.errors import MissingResourceError
from aeroclub.engine.windows import (
    Mission,
    Window,
    derive_windows,
    describe_window,
    sort_missions,
)

logger = logging.getLogger(__name__)

MIN_MISSION_SPAN = timedelta(minutes=1)
FALLBACK_STEP = timedelta(hours=2)


class RejectReason(str, Enum):
    OK = "ok"
    INVALID_TIMES = "invalid_times"
    TOO_SHORT = "too_short"
    PATH_CONFLICT = "path_conflict"
    PRE_USE_INTRUSION = "pre_use_intrusion"
    WINDOW_OVERLAP = "window_overlap"


@dataclass(frozen=True)
class ValidationResult:
    accepted: bool
    message: str
    reason: RejectReason = RejectReason.OK
    suggested_start: Optional[datetime] = None
    next_available_start: Optional[datetime] = None
    conflicting_mission: Optional[Mission] = None


def _fmt(dt: datetime) -> str:
    return dt.strftime("%Y-%m-%d %H:%M")


def _reject(
    reason: RejectReason,
    message: str,
    conflicting: Mission,
    policy: BufferPolicy,
) -> ValidationResult:
    earliest = next_available_start(conflicting, policy)
    logger.info(f"[validator] rejected ({reason.value}) against mission {conflicting.id}: {message}")
    return ValidationResult(
        accepted=False,
        message=message,
        reason=reason,
        suggested_start=earliest,
        next_available_start=earliest,
        conflicting_mission=conflicting,
    )


def _same_resource(proposed: Mission, existing: Iterable[Mission]) -> List[Mission]:
    out = []
    for m in existing:
        if m.resource_id is not None and m.resource_id != proposed.resource_id:
            logger.debug(f"[validator] skipping mission {m.id} on aircraft {m.resource_id}")
            continue
        # re-validating a stored mission must not collide with itself
        if proposed.id is not None and m.id == proposed.id:
            continue
        out.append(m)
    return sort_missions(out)


def _first_hit(windows: List[Window], start: datetime, end: datetime) -> Optional[Window]:
    for w in windows:
        if w.overlaps(start, end):
            return w
    return None


def validate_start(
    candidate_start: datetime,
    existing: Iterable[Mission],
    policy: BufferPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """
    Can preparation for a take-off begin at `candidate_start`?
    The pre-use span right before it must be clear of every existing window.
    """
    pre_start = candidate_start - policy.pre_use
    for m in sort_missions(existing):
        hit = _first_hit(derive_windows(m, policy, strict=False), pre_start, candidate_start)
        if hit is not None:
            earliest = next_available_start(m, policy)
            return _reject(
                RejectReason.PRE_USE_INTRUSION,
                f"Unavailable ({describe_window(hit, policy)}): "
                f"the aircraft is free from {_fmt(earliest)}",
                m,
                policy,
            )
    return ValidationResult(accepted=True, message="Start is valid", suggested_start=candidate_start)


def _check_path(proposed: Mission, existing: List[Mission], policy: BufferPolicy) -> Optional[ValidationResult]:
    # coarse pass: any window of another mission inside my whole span
    for m in existing:
        if _first_hit(derive_windows(m, policy, strict=False), proposed.scheduled_start, proposed.scheduled_end):
            return _reject(
                RejectReason.PATH_CONFLICT,
                f"Schedule conflict: mission {m.route()} "
                f"({_fmt(m.scheduled_start)} - {_fmt(m.scheduled_end)}) already holds this aircraft",
                m,
                policy,
            )
    return None


def _check_windows(proposed: Mission, existing: List[Mission], policy: BufferPolicy) -> Optional[ValidationResult]:
    proposed_windows = derive_windows(proposed, policy)
    for m in existing:
        for theirs in derive_windows(m, policy, strict=False):
            for mine in proposed_windows:
                if theirs.overlaps(mine.start, mine.end):
                    earliest = next_available_start(m, policy)
                    return _reject(
                        RejectReason.WINDOW_OVERLAP,
                        f"Conflict: {describe_window(theirs, policy)}. "
                        f"Next possible take-off: {_fmt(earliest)}",
                        m,
                        policy,
                    )
    return None


def validate_mission(
    proposed: Mission,
    existing: Iterable[Mission],
    policy: BufferPolicy = DEFAULT_POLICY,
) -> ValidationResult:
    """
    Decide whether `proposed` can be granted on its aircraft.

    Checks run in a fixed order and stop at the first failure:
    duration sanity, path conflict, pre-use intrusion, window-by-window overlap.
    The first existing mission (by scheduled start, then id) that fails a check
    is the one reported. Missions held on other aircraft are ignored.

    Raises MissingResourceError when the proposal has no aircraft and
    InvalidDurationError when its span cannot hold both buffers.
    """
    if proposed.resource_id is None:
        raise MissingResourceError("proposed mission")

    # reversed take-off/landing would otherwise be widened by the buffers into a valid-looking span
    reversed_actual = (
        proposed.actual_start is not None
        and proposed.actual_end is not None
        and proposed.actual_end <= proposed.actual_start
    )
    if proposed.scheduled_end <= proposed.scheduled_start or reversed_actual:
        return ValidationResult(
            accepted=False,
            message="Return must be after departure",
            reason=RejectReason.INVALID_TIMES,
        )
    if proposed.scheduled_end - proposed.scheduled_start < MIN_MISSION_SPAN:
        return ValidationResult(
            accepted=False,
            message="Mission too short (minimum 1 minute)",
            reason=RejectReason.TOO_SHORT,
        )

    # a span that cannot hold the buffers is a fault, raise before scanning
    derive_windows(proposed, policy)

    others = _same_resource(proposed, existing)

    result = _check_path(proposed, others, policy)
    if result is not None:
        return result

    result = validate_start(proposed.scheduled_start, others, policy)
    if not result.accepted:
        return result

    result = _check_windows(proposed, others, policy)
    if result is not None:
        return result

    return ValidationResult(
        accepted=True,
        message="Mission is valid",
        suggested_start=proposed.scheduled_start,
        next_available_start=next_available_start(proposed, policy),
    )


def suggest_start_times(
    resource_id: int,
    desired_start: datetime,
    usage_hours: float,
    existing: Iterable[Mission],
    policy: BufferPolicy = DEFAULT_POLICY,
    max_attempts: int = 10,
    max_suggestions: int = 3,
) -> List[datetime]:
    """
    Walk forward from `desired_start` and collect scheduled starts that would be
    accepted for a mission using the aircraft for `usage_hours`.

    A rejection jumps to its suggested start; an accepted start continues at its
    own next-available instant so suggestions never overlap each other.
    """
    missions = list(existing)
    span = policy.pre_use + timedelta(hours=usage_hours) + policy.post_use

    suggestions: List[datetime] = []
    current = desired_start
    for _ in range(max_attempts):
        candidate = Mission(
            scheduled_start=current,
            scheduled_end=current + span,
            resource_id=resource_id,
            total_usage_hours=usage_hours,
        )
        result = validate_mission(candidate, missions, policy)
        if result.accepted:
            suggestions.append(current)
            if len(suggestions) >= max_suggestions:
                break
            current = result.next_available_start
        elif result.suggested_start is not None and result.suggested_start > current:
            current = result.suggested_start
        else:
            current = current + FALLBACK_STEP
    return suggestions
