"""
Impact Traversal Engine

Bounded-depth, cycle-safe breadth-first propagation from the rules a change
touches directly to every rule downstream of them.

Each rule id is marked visited when it is enqueued, not when it is processed.
That guarantees a rule is enqueued at most once, so cycles of any length
(including self-loops) terminate, and every rule keeps the level of the
shortest path that reached it. Seeds are all marked before expansion starts,
so a rule that is both changed and downstream of another change stays DIRECT.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, Iterable, Iterator, List, Optional, Tuple

from ...models.enums import ImpactLevel

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 3

NeighborFn = Callable[[str], Iterable[str]]


def impact_level_for_depth(depth: int) -> ImpactLevel:
    """
    Map a BFS depth to its impact level.

    Args:
        depth: Hops from the nearest seed (0 for seeds)

    Returns:
        DIRECT for 0, INDIRECT for 1, CASCADE for anything deeper
    """
    if depth < 0:
        raise ValueError(f"Depth must be non-negative, got {depth}")
    if depth == 0:
        return ImpactLevel.DIRECT
    if depth == 1:
        return ImpactLevel.INDIRECT
    return ImpactLevel.CASCADE


@dataclass(frozen=True)
class ImpactTrace:
    """
    How one rule was reached.

    Attributes:
        rule_id: Impacted rule
        level: Impact level derived from depth
        path: Rule ids from the seed to this rule, inclusive
        depth: Hops from the seed (len(path) - 1)
    """

    rule_id: str
    level: ImpactLevel
    path: Tuple[str, ...]
    depth: int


class ImpactTraversal:
    """
    Canonical traversal result: rule_id -> ImpactTrace in discovery order.

    Both the chain view and the graph view are derived from one instance.
    """

    def __init__(self, traces: Optional[Dict[str, ImpactTrace]] = None):
        self._traces: Dict[str, ImpactTrace] = dict(traces or {})

    def __len__(self) -> int:
        return len(self._traces)

    def __contains__(self, rule_id: object) -> bool:
        return rule_id in self._traces

    def __iter__(self) -> Iterator[ImpactTrace]:
        return iter(self._traces.values())

    def get(self, rule_id: str) -> Optional[ImpactTrace]:
        return self._traces.get(rule_id)

    @property
    def rule_ids(self) -> List[str]:
        return list(self._traces)

    def by_level(self, level: ImpactLevel) -> List[ImpactTrace]:
        return [trace for trace in self._traces.values() if trace.level == level]

    def is_empty(self) -> bool:
        return not self._traces


def propagate_impact(
    seeds: Iterable[str],
    neighbors: NeighborFn,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ImpactTraversal:
    """
    Breadth-first impact propagation with a depth cap.

    Args:
        seeds: Directly impacted rule ids, in priority order
        neighbors: Function returning downstream rule ids of a rule
        max_depth: Deepest level explored; nodes at this depth are recorded
            but not expanded

    Returns:
        ImpactTraversal covering every rule reachable within ``max_depth``

    Raises:
        ValueError: If max_depth is negative
    """
    if max_depth < 0:
        raise ValueError(f"max_depth must be non-negative, got {max_depth}")

    visited = set()
    queue: Deque[Tuple[str, Tuple[str, ...], int]] = deque()

    for seed in seeds:
        if seed in visited:
            continue
        visited.add(seed)
        queue.append((seed, (seed,), 0))

    traces: Dict[str, ImpactTrace] = {}

    while queue:
        rule_id, path, depth = queue.popleft()
        traces[rule_id] = ImpactTrace(
            rule_id=rule_id,
            level=impact_level_for_depth(depth),
            path=path,
            depth=depth,
        )

        if depth >= max_depth:
            logger.debug(f"Max depth reached at rule {rule_id} (path: {' -> '.join(path)})")
            continue

        for target in neighbors(rule_id):
            if target in visited:
                logger.debug(f"Rule {target} already reached - skipping edge {rule_id} -> {target}")
                continue
            visited.add(target)
            queue.append((target, path + (target,), depth + 1))

    logger.debug(f"Impact traversal complete: {len(traces)} rules reached (max depth {max_depth})")
    return ImpactTraversal(traces)
