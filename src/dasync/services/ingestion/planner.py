"""Window planning for one sync pass."""

from __future__ import annotations

from dasync.models import BatchIndexRange


def plan_range(checkpoint: int, latest_index: int, step: int) -> BatchIndexRange:
    """Return the window of batch indices to process next.

    The window starts at the checkpoint and is at most ``step`` wide. When
    the remote layer is not ahead, the result is ``[checkpoint,
    latest_index)`` which has no work (and may have ``end < start``).

    Examples:
        ```python
        plan_range(10, 100, 20)  # [10, 30)
        plan_range(10, 15, 20)   # [10, 15)
        plan_range(50, 50, 20)   # [50, 50)
        ```
    """
    if step < 1:
        raise ValueError(f"step must be positive, got {step}")
    if latest_index <= checkpoint:
        return BatchIndexRange(start=checkpoint, end=latest_index)
    return BatchIndexRange(start=checkpoint, end=checkpoint + min(step, latest_index - checkpoint))
