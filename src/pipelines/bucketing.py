from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Callable, Dict, Generic, Hashable, Iterable, List, TypeVar

RowT = TypeVar("RowT")
KeyT = TypeVar("KeyT", bound=Hashable)


@dataclass(frozen=True)
class PartitionPlan(Generic[KeyT, RowT]):
    """Rows grouped by key, keys in order of first appearance."""

    keys: List[KeyT]
    partitions: Dict[KeyT, List[RowT]]


def build_partition_plan(
    rows: Iterable[RowT],
    key_fn: Callable[[RowT], KeyT],
) -> PartitionPlan[KeyT, RowT]:
    """Group ``rows`` by ``key_fn`` without assuming they arrive sorted."""
    partitions: Dict[KeyT, List[RowT]] = defaultdict(list)
    keys: List[KeyT] = []
    for row in rows:
        key = key_fn(row)
        if key not in partitions:
            keys.append(key)
        partitions[key].append(row)
    return PartitionPlan(keys=keys, partitions=dict(partitions))
