"""Row-level security policies filtering the rows a role may see."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

RowFilter = Callable[[Any], bool]


@dataclass
class RowLevelSecurityPolicy:
    """A named filter on one table, applying to the listed roles or, if none
    are listed, to every role. A policy without a filter admits every row."""

    table: str
    policy_name: str
    filter: RowFilter | None = None
    roles: list[str] = field(default_factory=list)

    def applies_to(self, role: str) -> bool:
        return not self.roles or role in self.roles

    def admits(self, row: Any) -> bool:
        return self.filter is None or bool(self.filter(row))


class RLSManager:
    """Policies grouped by table."""

    def __init__(self) -> None:
        self._policies: dict[str, list[RowLevelSecurityPolicy]] = {}

    def add_policy(self, policy: RowLevelSecurityPolicy) -> None:
        self._policies.setdefault(policy.table, []).append(policy)

    def remove_policy(self, table: str, policy_name: str) -> None:
        policies = self._policies.get(table)
        if policies is not None:
            policies[:] = [p for p in policies if p.policy_name != policy_name]

    def get_policies(self, table: str, role: str) -> list[RowLevelSecurityPolicy]:
        return [p for p in self._policies.get(table, ()) if p.applies_to(role)]

    def apply_policies(self, table: str, role: str, tuples: Iterable[Any]) -> list[Any]:
        """Keep only the rows that every applicable policy admits."""
        policies = self.get_policies(table, role)
        return [row for row in tuples if all(p.admits(row) for p in policies)]

    def list_policies(self, table: str) -> list[str]:
        return [p.policy_name for p in self._policies.get(table, ())]