import re
from typing import Callable
from uuid import uuid4


def slugify(value: str) -> str:
    """Lower-cases, strips punctuation and joins words with '-'."""
    value = value.lower().strip()
    value = re.sub(r"[^\w\s-]", "", value)
    value = re.sub(r"[\s_]+", "-", value)
    return re.sub(r"-+", "-", value).strip("-")


class SlotIdFactory:
    """
    Issues slot ids of the form ``<type>-<day>-<HHMM>-<HHMM>-<hex>``.

    The readable prefix keeps ids recognizable in links and logs; the random
    suffix makes them unique regardless of how many slots are created at once.
    Pass ``unique`` to control the suffix (tests use a counter).
    """

    def __init__(self, unique: Callable[[], str] = None):
        self._unique = unique or (lambda: uuid4().hex)

    def __call__(self, slot_type: str, day: str, start: str, end: str) -> str:
        type_slug = slugify(slot_type) or "slot"
        time_slug = f"{day.lower()}-{start.replace(':', '')}-{end.replace(':', '')}"
        return f"{type_slug}-{time_slug}-{self._unique()}"


default_slot_id_factory = SlotIdFactory()
