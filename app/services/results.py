from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Generic, TypeVar

ValueT = TypeVar("ValueT")


class MutationStatus(enum.Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MutationResult(Generic[ValueT]):
    """Outcome of an update addressed by id.

    Updating an unknown id is not an error: nothing is written and ``value``
    is the caller's input, unchanged.
    """

    status: MutationStatus
    value: ValueT

    @property
    def found(self) -> bool:
        return self.status is MutationStatus.OK

    @classmethod
    def ok(cls, value: ValueT) -> MutationResult[ValueT]:
        return cls(status=MutationStatus.OK, value=value)

    @classmethod
    def not_found(cls, value: ValueT) -> MutationResult[ValueT]:
        return cls(status=MutationStatus.NOT_FOUND, value=value)
