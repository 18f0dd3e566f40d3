"""Batch orchestration for the translation pipeline."""

from .batch_runner import BatchRunner, ItemState, RunStats

__all__ = [
    "BatchRunner",
    "ItemState",
    "RunStats",
]
