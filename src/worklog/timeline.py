from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Iterator, Union


class ContractTermsError(ValueError):
    """Raised when contract rate data cannot be turned into a timeline."""


@dataclass(frozen=True)
class RateChange:
    effective_from: date
    value: float


RateChangeLike = Union[RateChange, tuple[date, float]]


class RateTimeline:
    """
    Step function over contract rates (daily hours, monthly vacation days).

    A value holds from its effective_from (inclusive) until the next
    change (exclusive). Before the first change the rate is 0.0.
    """

    __slots__ = ("_changes",)

    def __init__(self, changes: Iterable[RateChangeLike] = ()) -> None:
        items = []
        for change in changes:
            if not isinstance(change, RateChange):
                effective_from, value = change
                change = RateChange(effective_from=effective_from, value=float(value))
            if change.value < 0:
                raise ContractTermsError(
                    f"rate must be >= 0 (got {change.value} from {change.effective_from})"
                )
            items.append(change)
        # stable: for equal dates the later entry wins in rate_at
        items.sort(key=lambda c: c.effective_from)
        self._changes: tuple[RateChange, ...] = tuple(items)

    def __iter__(self) -> Iterator[RateChange]:
        return iter(self._changes)

    def __len__(self) -> int:
        return len(self._changes)

    def __bool__(self) -> bool:
        return bool(self._changes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RateTimeline):
            return NotImplemented
        return self._changes == other._changes

    def __hash__(self) -> int:
        return hash(self._changes)

    def __repr__(self) -> str:
        pairs = ", ".join(f"{c.effective_from.isoformat()}={c.value}" for c in self._changes)
        return f"RateTimeline({pairs})"

    def rate_at(self, day: date) -> float:
        rate = 0.0
        for change in self._changes:
            if change.effective_from > day:
                break
            rate = change.value
        return rate

    def boundaries_within(self, start: date, end: date) -> list[date]:
        """Effective dates strictly inside (start, end), ascending, without duplicates."""
        seen: list[date] = []
        for change in self._changes:
            day = change.effective_from
            if start < day < end and (not seen or seen[-1] != day):
                seen.append(day)
        return seen


def rate_at(timeline: RateTimeline, day: date) -> float:
    return timeline.rate_at(day)
