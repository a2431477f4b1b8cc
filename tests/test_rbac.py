import pytest

from minsql.security.rbac import Permission, RBACError, RBACManager


@pytest.fixture
def manager():
    return RBACManager()


def test_default_roles(manager):
    assert sorted(manager.list_roles()) == ["admin", "readonly", "readwrite"]
    assert manager.roles["admin"].permissions == set(Permission)


def test_readonly_user_can_only_select(manager):
    manager.create_user("alice", ["readonly"])
    assert manager.check_permission("alice", Permission.SELECT) is True
    assert manager.check_permission("alice", Permission.INSERT) is False
    assert manager.get_user_permissions("alice") == {Permission.SELECT}


def test_unknown_user_has_nothing(manager):
    assert manager.check_permission("nobody", Permission.SELECT) is False
    assert manager.get_user_permissions("nobody") == set()


def test_create_user_with_unknown_role_fails(manager):
    with pytest.raises(RBACError):
        manager.create_user("bob", ["ghost"])
    assert "bob" not in manager.list_users()


def test_duplicate_user_and_role(manager):
    manager.create_user("alice", [])
    with pytest.raises(RBACError):
        manager.create_user("alice", [])
    with pytest.raises(RBACError):
        manager.create_role("admin", [])


def test_grant_and_revoke_permission(manager):
    manager.create_role("analyst", {Permission.SELECT})
    manager.create_user("carol", ["analyst"])
    manager.grant_permission("analyst", Permission.CREATE_INDEX)
    assert manager.check_permission("carol", Permission.CREATE_INDEX) is True
    manager.revoke_permission("analyst", Permission.CREATE_INDEX)
    assert manager.check_permission("carol", Permission.CREATE_INDEX) is False


def test_permission_ops_on_missing_role(manager):
    with pytest.raises(RBACError):
        manager.grant_permission("ghost", Permission.SELECT)
    with pytest.raises(RBACError):
        manager.revoke_permission("ghost", Permission.SELECT)


def test_grant_and_revoke_role(manager):
    manager.create_user("dave", ["readonly"])
    manager.grant_role("dave", "readwrite")
    manager.grant_role("dave", "readwrite")
    assert manager.users["dave"].roles == ["readonly", "readwrite"]
    assert manager.check_permission("dave", Permission.DELETE) is True
    manager.revoke_role("dave", "readwrite")
    assert manager.check_permission("dave", Permission.DELETE) is False


def test_role_ops_on_missing_user_or_role(manager):
    with pytest.raises(RBACError):
        manager.grant_role("ghost", "readonly")
    with pytest.raises(RBACError):
        manager.revoke_role("ghost", "readonly")
    manager.create_user("erin", [])
    with pytest.raises(RBACError):
        manager.grant_role("erin", "ghost")


def test_inherited_permissions(manager):
    manager.create_role("child", set())
    manager.roles["child"].inherits_from.append("readwrite")
    manager.create_user("frank", ["child"])
    assert manager.check_permission("frank", Permission.UPDATE) is True
    assert manager.get_user_permissions("frank") == manager.roles["readwrite"].permissions


def test_inheritance_cycle_terminates(manager):
    manager.create_role("a", set())
    manager.create_role("b", {Permission.GRANT})
    manager.roles["a"].inherits_from.append("b")
    manager.roles["b"].inherits_from.append("a")
    manager.create_user("gina", ["a"])
    assert manager.check_permission("gina", Permission.GRANT) is True
    assert manager.check_permission("gina", Permission.REVOKE) is False