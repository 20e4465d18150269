from __future__ import annotations

from typing import Callable
from uuid import uuid4

IdFactory = Callable[[], str]


def new_record_id() -> str:
    return uuid4().hex
