# Copyright 2025 msq
from __future__ import annotations

from typing import List, Sequence, TypeVar

from saferoute.errors import ValidationError

T = TypeVar("T")

DEFAULT_SAMPLE_TARGET = 10


def sample_indices(path_length: int, target_count: int = DEFAULT_SAMPLE_TARGET) -> range:
    """Indices of an evenly strided subsample: stride = max(1, length // target)."""
    if target_count < 1:
        raise ValidationError(f"sample target count must be >= 1, got {target_count}", field="sample_target_count")
    if path_length <= 0:
        return range(0)
    stride = max(1, path_length // target_count)
    return range(0, path_length, stride)


def sample_path(path: Sequence[T], target_count: int = DEFAULT_SAMPLE_TARGET) -> List[T]:
    return [path[i] for i in sample_indices(len(path), target_count)]
