"""Role-based access control."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class RBACError(Exception):
    """Raised when a role or user operation cannot be carried out."""


class Permission(Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    CREATE_TABLE = "create_table"
    DROP_TABLE = "drop_table"
    CREATE_INDEX = "create_index"
    DROP_INDEX = "drop_index"
    CREATE_USER = "create_user"
    GRANT = "grant"
    REVOKE = "revoke"


@dataclass
class Role:
    name: str
    permissions: set[Permission] = field(default_factory=set)
    inherits_from: list[str] = field(default_factory=list)


@dataclass
class User:
    username: str
    roles: list[str] = field(default_factory=list)


_READWRITE = {Permission.SELECT, Permission.INSERT, Permission.UPDATE, Permission.DELETE}


class RBACManager:
    """Holds roles and users; starts with admin, readonly and readwrite roles."""

    def __init__(self) -> None:
        self.roles: dict[str, Role] = {
            "admin": Role("admin", set(Permission)),
            "readonly": Role("readonly", {Permission.SELECT}),
            "readwrite": Role("readwrite", set(_READWRITE)),
        }
        self.users: dict[str, User] = {}

    def _role(self, role_name: str) -> Role:
        try:
            return self.roles[role_name]
        except KeyError:
            raise RBACError(f"Role not found: {role_name}") from None

    def _user(self, username: str) -> User:
        try:
            return self.users[username]
        except KeyError:
            raise RBACError(f"User not found: {username}") from None

    def create_role(self, name: str, permissions: Iterable[Permission]) -> None:
        if name in self.roles:
            raise RBACError(f"Role already exists: {name}")
        self.roles[name] = Role(name, set(permissions))

    def grant_permission(self, role_name: str, permission: Permission) -> None:
        self._role(role_name).permissions.add(permission)

    def revoke_permission(self, role_name: str, permission: Permission) -> None:
        self._role(role_name).permissions.discard(permission)

    def create_user(self, username: str, roles: Iterable[str]) -> None:
        if username in self.users:
            raise RBACError(f"User already exists: {username}")
        roles = list(roles)
        for role in roles:
            self._role(role)
        self.users[username] = User(username, roles)

    def grant_role(self, username: str, role: str) -> None:
        user = self._user(username)
        self._role(role)
        if role not in user.roles:
            user.roles.append(role)

    def revoke_role(self, username: str, role: str) -> None:
        user = self._user(username)
        user.roles = [r for r in user.roles if r != role]

    def _role_closure(self, role_names: Iterable[str]) -> list[Role]:
        """Every existing role reachable from ``role_names`` through inheritance."""
        seen: set[str] = set()
        found: list[Role] = []
        pending = list(role_names)
        while pending:
            name = pending.pop()
            if name in seen:
                continue
            seen.add(name)
            role = self.roles.get(name)
            if role is None:
                continue
            found.append(role)
            pending.extend(role.inherits_from)
        return found

    def check_permission(self, username: str, permission: Permission) -> bool:
        user = self.users.get(username)
        if user is None:
            return False
        return any(permission in role.permissions for role in self._role_closure(user.roles))

    def list_users(self) -> list[str]:
        return list(self.users)

    def list_roles(self) -> list[str]:
        return list(self.roles)

    def get_user_permissions(self, username: str) -> set[Permission]:
        user = self.users.get(username)
        if user is None:
            return set()
        return {p for role in self._role_closure(user.roles) for p in role.permissions}