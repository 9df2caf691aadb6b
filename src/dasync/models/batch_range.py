"""Half-open window of rollup batch indices processed in one sync pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._validation import validate_non_negative_int


if TYPE_CHECKING:
    from collections.abc import Iterator


@dataclass(frozen=True, slots=True)
class BatchIndexRange:
    """Half-open window ``[start, end)`` of batch indices.

    ``end`` may be lower than ``start`` when the remote layer reports a
    latest index below the local checkpoint; such a range, like an empty
    one, means there is no work.

    Attributes:
        start: First batch index to process (the current checkpoint).
        end: One past the last batch index to process.

    Examples:
        ```python
        window = BatchIndexRange(start=10, end=30)
        window.has_work  # True
        len(window)      # 20
        list(window)[:2] # [10, 11]
        ```
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        validate_non_negative_int(self.start, "start")
        validate_non_negative_int(self.end, "end")

    @property
    def has_work(self) -> bool:
        """Whether the window contains at least one index."""
        return self.start < self.end

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.start, self.end))
