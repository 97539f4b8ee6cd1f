"""Shared pipeline helpers for key-based partitioning of row streams."""

from .bucketing import PartitionPlan, build_partition_plan

__all__ = [
    "PartitionPlan",
    "build_partition_plan",
]
