"""Which mutations are applied before the API answers and which wait for it."""
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class MutationKind(str, Enum):
    TOGGLE_LIKE = "toggle-like"
    CREATE_POST = "create-post"
    CREATE_REPLY = "create-reply"
    DELETE_POST = "delete-post"
    DELETE_REPLY = "delete-reply"

    @property
    def lock_kind(self) -> str:
        """Lock namespace shared by mutations that must not overlap."""
        if self is MutationKind.TOGGLE_LIKE:
            return "like"
        if self in (MutationKind.DELETE_POST, MutationKind.DELETE_REPLY):
            return "delete"
        return "create"


class MutationPolicy(str, Enum):
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"


MUTATION_POLICIES: Mapping[MutationKind, MutationPolicy] = MappingProxyType(
    {
        MutationKind.TOGGLE_LIKE: MutationPolicy.OPTIMISTIC,
        MutationKind.CREATE_POST: MutationPolicy.PESSIMISTIC,
        MutationKind.CREATE_REPLY: MutationPolicy.PESSIMISTIC,
        MutationKind.DELETE_POST: MutationPolicy.PESSIMISTIC,
        MutationKind.DELETE_REPLY: MutationPolicy.PESSIMISTIC,
    }
)


def policy_for(kind: MutationKind, policies: Mapping[MutationKind, MutationPolicy] | None = None) -> MutationPolicy:
    table = MUTATION_POLICIES if policies is None else policies
    return table.get(kind, MutationPolicy.PESSIMISTIC)


__all__ = ["MutationKind", "MutationPolicy", "MUTATION_POLICIES", "policy_for"]
