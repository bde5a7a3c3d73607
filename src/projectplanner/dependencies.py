"""Ordering of activities so prerequisites always come first.

Dependencies are supplied by the caller, either as a mapping from activity
type to prerequisite types or as a lookup callable, so the same resolver
serves any template vocabulary.
"""
from __future__ import annotations

import warnings
from collections import defaultdict
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from .activity import Activity
from .errors import CycleWarning

DependencyLookup = Callable[[str], Optional[Iterable[str]]]
DependencySource = Union[None, Mapping[str, Iterable[str]], DependencyLookup]


def as_lookup(dependencies: DependencySource) -> DependencyLookup:
    """Normalize a mapping, a callable or ``None`` into a lookup function.

    A callable that raises ``LookupError`` (a ``KeyError`` from
    ``deps.__getitem__``, say) is read as "no prerequisites"; any other
    exception propagates.
    """

    if dependencies is None:
        return lambda activity_type: ()
    if isinstance(dependencies, Mapping):
        table = dependencies
        return lambda activity_type: table.get(activity_type, ())
    if callable(dependencies):
        lookup = dependencies

        def tolerant(activity_type: str) -> Optional[Iterable[str]]:
            try:
                return lookup(activity_type)
            except LookupError:
                return ()

        return tolerant
    raise TypeError("dependencies must be a mapping, a callable or None.")


def prerequisites_of(activity_type: str, dependencies: DependencySource) -> List[str]:
    """Return the declared prerequisites of a type, in declaration order."""

    return list(as_lookup(dependencies)(activity_type) or ())


def build_dependency_graph(
    activities: Sequence[Activity],
    dependencies: DependencySource,
) -> Dict[str, List[str]]:
    """Map each activity type to the in-set types it depends on.

    Prerequisites that are not part of ``activities`` are left out, which
    makes them vacuously satisfied. Self references are kept.
    """

    lookup = as_lookup(dependencies)
    present = {activity.activity_type for activity in activities}
    graph: Dict[str, List[str]] = {}

    for activity in activities:
        if activity.activity_type in graph:
            continue
        edges: List[str] = []
        for prerequisite in lookup(activity.activity_type) or ():
            if prerequisite in present and prerequisite not in edges:
                edges.append(prerequisite)
        graph[activity.activity_type] = edges
    return graph


def missing_dependencies(
    activities: Sequence[Activity],
    dependencies: DependencySource,
) -> Dict[str, List[str]]:
    """List prerequisites that reference types absent from the plan.

    The scheduler ignores them; callers can use this to report them.
    """

    lookup = as_lookup(dependencies)
    present = {activity.activity_type for activity in activities}
    missing: Dict[str, List[str]] = defaultdict(list)
    for activity in activities:
        for prerequisite in lookup(activity.activity_type) or ():
            if prerequisite not in present and prerequisite not in missing[activity.activity_type]:
                missing[activity.activity_type].append(prerequisite)
    return {activity_type: preds for activity_type, preds in missing.items() if preds}


def _stable_passes(
    items: Sequence[Activity],
    graph: Dict[str, List[str]],
) -> Tuple[List[Activity], List[Activity]]:
    """Emit activities in original order as their prerequisites are emitted.

    Returns the emitted order and whatever could not be placed.
    """

    order: List[Activity] = []
    emitted: Set[str] = set()
    placed = [False] * len(items)

    for index, activity in enumerate(items):
        if not graph[activity.activity_type]:
            order.append(activity)
            emitted.add(activity.activity_type)
            placed[index] = True

    progress = True
    while progress:
        progress = False
        for index, activity in enumerate(items):
            if placed[index]:
                continue
            if all(dep in emitted for dep in graph[activity.activity_type]):
                order.append(activity)
                emitted.add(activity.activity_type)
                placed[index] = True
                progress = True

    leftover = [activity for index, activity in enumerate(items) if not placed[index]]
    return order, leftover


def depth_first_order(
    activities: Sequence[Activity],
    dependencies: DependencySource,
) -> List[Activity]:
    """Post-order depth-first topological sort.

    Roots are visited in original order. Edges back into the current path
    are skipped, so cycles still produce a total order.
    """

    items = list(activities)
    graph = build_dependency_graph(items, dependencies)
    by_type: Dict[str, List[Activity]] = defaultdict(list)
    for activity in items:
        by_type[activity.activity_type].append(activity)

    order: List[Activity] = []
    visited: Set[str] = set()
    on_path: Set[str] = set()

    for root in items:
        if root.activity_type in visited:
            continue
        on_path.add(root.activity_type)
        stack = [(root.activity_type, iter(graph[root.activity_type]))]
        while stack:
            node, pending = stack[-1]
            for dep in pending:
                if dep not in visited and dep not in on_path:
                    on_path.add(dep)
                    stack.append((dep, iter(graph[dep])))
                    break
            else:
                stack.pop()
                on_path.discard(node)
                visited.add(node)
                order.extend(by_type[node])
    return order


def unresolved_types(
    activities: Sequence[Activity],
    dependencies: DependencySource,
) -> List[str]:
    """Types that cannot be ordered because they sit on or behind a cycle."""

    items = list(activities)
    _, leftover = _stable_passes(items, build_dependency_graph(items, dependencies))
    seen: List[str] = []
    for activity in leftover:
        if activity.activity_type not in seen:
            seen.append(activity.activity_type)
    return seen


def resolve_order(
    activities: Sequence[Activity],
    dependencies: DependencySource = None,
) -> List[Activity]:
    """Return the activities in an order that satisfies every dependency.

    Independent activities keep their relative input order. When a cycle
    blocks this, a ``CycleWarning`` is emitted and the depth-first order is
    returned instead.
    """

    items = list(activities)
    graph = build_dependency_graph(items, dependencies)
    order, leftover = _stable_passes(items, graph)
    if not leftover:
        return order

    blocked = sorted({activity.activity_type for activity in leftover})
    warnings.warn(
        f"Dependency cycle involving {', '.join(blocked)}; using depth-first order.",
        CycleWarning,
        stacklevel=2,
    )
    return depth_first_order(items, dependencies)
