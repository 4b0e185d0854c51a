from typing import Iterable, Iterator, List, Sequence, Tuple

from helper import from_minutes, to_minutes


class TimeSlots:
    """
    The slots ``[cursor, cursor + interval)`` tiling ``[start, end)``.

    Iterating is lazy and can be repeated. A trailing remainder shorter than
    ``interval`` is dropped, so a range shorter than one interval is empty.
    """

    def __init__(self, start: str, end: str, interval: int):
        self.start = start
        self.end = end
        self.interval = interval
        self._start = to_minutes(start)
        self._end = to_minutes(end)
        if interval <= 0:
            raise ValueError("interval must be positive")

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        cursor = self._start
        while cursor + self.interval <= self._end:
            yield from_minutes(cursor), from_minutes(cursor + self.interval)
            cursor += self.interval

    def __len__(self) -> int:
        if self._end <= self._start:
            return 0
        return (self._end - self._start) // self.interval


def generate(start: str, end: str, interval: int) -> TimeSlots:
    return TimeSlots(start, end, interval)


def expand(days: Iterable[str], time_ranges: Sequence[Tuple[str, str]], interval: int) -> List[Tuple[str, str, str]]:
    """
    Cross product ``days x time_ranges x generated slots`` as (day, start, end),
    in that order.
    """
    return [
        (day, slot_start, slot_end)
        for day in days
        for range_start, range_end in time_ranges
        for slot_start, slot_end in generate(range_start, range_end, interval)
    ]
