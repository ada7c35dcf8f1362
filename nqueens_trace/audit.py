"""Consistency checks for engine results.

Each ``audit_*`` function inspects a ``SolveResult`` after the fact and
returns a list of human-readable violations; an empty list means the trace
and metrics agree with each other. Nothing here feeds back into a search.
"""

from __future__ import annotations

from typing import List, Optional, Set, Tuple

from .types import FailureReason, Position, RunStatus, SolveResult, Step, Trace
from .utils import conflict_count


def split_restarts(trace: Trace) -> List[List[Step]]:
    """Split a hill-climbing trace into per-restart segments.

    Empty steps are boundary markers and are not part of any segment; a
    trailing marker (exhausted run) does not produce an empty segment.
    """
    segments: List[List[Step]] = []
    current: List[Step] = []
    for step in trace:
        if not step:
            if current:
                segments.append(current)
            current = []
            continue
        current.append(step)
    if current:
        segments.append(current)
    return segments


def step_delta(previous: Step, current: Step) -> Tuple[Set[Position], Set[Position]]:
    """Return ``(added, removed)`` positions between two snapshots."""
    before = set(previous)
    after = set(current)
    return after - before, before - after


def audit_backtracking_trace(result: SolveResult, size: Optional[int] = None) -> List[str]:
    """Check single-edit transitions and the structural counters."""
    problems: List[str] = []
    trace = result.trace
    metrics = result.metrics

    removals = 0
    previous: Step = ()
    for index, step in enumerate(trace):
        added, removed = step_delta(previous, step)
        if len(added) + len(removed) != 1:
            problems.append(f"step {index}: expected one queen added or removed, got +{len(added)} -{len(removed)}")
        if removed:
            removals += 1
        if conflict_count(step) != 0:
            problems.append(f"step {index}: snapshot contains attacking queens")
        previous = step

    if metrics.backtracks != removals:
        problems.append(f"backtracks={metrics.backtracks} but trace holds {removals} removals")
    deepest = max((len(step) for step in trace), default=0)
    if metrics.max_depth != deepest:
        problems.append(f"max_depth={metrics.max_depth} but largest step has {deepest} queens")
    if metrics.visited_states != len(trace) or metrics.steps_count != len(trace):
        problems.append("visited_states and steps_count must both equal the trace length")
    if metrics.success:
        if size is not None and len(result.final_step) != size:
            problems.append(f"solved run ends with {len(result.final_step)} queens, expected {size}")
    elif metrics.status is RunStatus.NO_SOLUTION and trace and trace[-1]:
        problems.append("exhausted search must end with an empty board")
    if metrics.conflict_trend or metrics.restarts or metrics.failure_reason is not None:
        problems.append("backtracking metrics carry hill-climbing fields")
    return problems


def audit_hill_climbing_trace(result: SolveResult, size: Optional[int] = None) -> List[str]:
    """Check restart segments, the conflict trend and the failure contract."""
    problems: List[str] = []
    trace = result.trace
    metrics = result.metrics

    accepted = [step for step in trace if step]
    markers = len(trace) - len(accepted)
    if metrics.restarts != markers:
        problems.append(f"restarts={metrics.restarts} but trace holds {markers} restart markers")
    if len(metrics.conflict_trend) != len(accepted):
        problems.append(f"conflict_trend has {len(metrics.conflict_trend)} entries for {len(accepted)} accepted states")
    else:
        for index, (step, expected) in enumerate(zip(accepted, metrics.conflict_trend)):
            if conflict_count(step) != expected:
                problems.append(f"accepted state {index}: trend says {expected}, board has {conflict_count(step)}")

    for step in accepted:
        columns = [column for _, column in step]
        if len(set(columns)) != len(columns) or (size is not None and len(columns) != size):
            problems.append("hill-climbing state must hold exactly one queen per column")
            break

    for number, segment in enumerate(split_restarts(trace)):
        scores = [conflict_count(step) for step in segment]
        for before, after in zip(scores, scores[1:]):
            if after > before:
                problems.append(f"restart {number}: conflicts rose from {before} to {after}")
                break

    if metrics.steps_count != len(trace):
        problems.append("steps_count must equal the trace length")
    if metrics.success:
        if metrics.failure_reason is not None:
            problems.append("successful run must not carry a failure reason")
        if not trace or not trace[-1] or conflict_count(trace[-1]) != 0:
            problems.append("successful run must end on a conflict-free board")
    elif metrics.status is RunStatus.EXHAUSTED:
        if not isinstance(metrics.failure_reason, FailureReason):
            problems.append("exhausted run must carry a failure reason")
    elif metrics.failure_reason is not None:
        problems.append(f"{metrics.status.value} run must not carry a failure reason")
    return problems
