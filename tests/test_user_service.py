from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest

from userapi.db.session import get_session
from userapi.domain.users import Gender
from userapi.repositories.user_repository import UserRepository
from userapi.services.results import ErrorKind, Failure, Success
from userapi.services.user_service import UserService


def _kind(result):
    assert isinstance(result, Failure), result
    return result.kind


# ---------------------------------------- create ----------------------------------------
def test_admin_can_create_admin(service, admin):
    result = service.create_user("carol", "Secret3", "Carol", is_admin=True, created_by="admin")

    assert isinstance(result, Success)
    assert result.value.is_admin is True
    assert result.value.created_by == "admin"


def test_non_admin_creator_cannot_grant_admin(service, bob):
    result = service.create_user("carol", "Secret3", "Carol", is_admin=True, created_by="bob")

    assert isinstance(result, Success)
    assert result.value.is_admin is False


def test_self_registration_never_grants_admin(service):
    result = service.create_user("dave", "Secret4", "Dave", is_admin=True, created_by=None)

    assert isinstance(result, Success)
    assert result.value.is_admin is False
    assert result.value.created_by is None


def test_revoked_admin_cannot_grant_admin(service, repo, admin):
    repo.create("root", "Secret5", "Root", is_admin=True)
    service.delete_user("admin", soft=True, revoked_by="root")

    result = service.create_user("carol", "Secret3", "Carol", is_admin=True, created_by="admin")

    assert result.value.is_admin is False


@pytest.mark.parametrize("revoke", [False, True])
def test_create_existing_login_fails(service, admin, bob, revoke):
    if revoke:
        service.delete_user("bob", soft=True, revoked_by="admin")

    result = service.create_user("bob", "Secret9", "Other", created_by="admin")

    assert _kind(result) == ErrorKind.LOGIN_ALREADY_EXISTS


def test_uniqueness_enforced_when_availability_check_is_stale(service, repo, bob, monkeypatch):
    # simulate a concurrent request that passed the early check before bob was written
    monkeypatch.setattr(repo, "is_login_available", lambda login: True)

    result = service.create_user("bob", "Secret9", "Other")

    assert _kind(result) == ErrorKind.LOGIN_ALREADY_EXISTS
    assert len([u for u in repo.list_active_sorted_by_creation() if u.login == "bob"]) == 1


def test_concurrent_creates_of_same_login_yield_one_account(temp_db):
    workers = 8
    start = threading.Barrier(workers)

    def register():
        with get_session() as session:
            service = UserService(UserRepository(session))
            start.wait(timeout=10)
            return service.create_user("dave", "Secret4", "Dave")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda _: register(), range(workers)))

    assert len([r for r in results if isinstance(r, Success)]) == 1
    assert [r.kind for r in results if isinstance(r, Failure)] == [ErrorKind.LOGIN_ALREADY_EXISTS] * (workers - 1)
    with get_session() as session:
        assert [u.login for u in UserRepository(session).list_active_sorted_by_creation()] == ["dave"]


# ---------------------------------------- authorization ----------------------------------------
def test_self_can_update_own_name(service, bob):
    result = service.update_name("bob", "Robert", "bob")

    assert isinstance(result, Success)
    assert result.value.name == "Robert"
    assert result.value.modified_by == "bob"


def test_user_cannot_update_someone_else(service, bob, alice):
    assert _kind(service.update_name("alice", "Mallory", "bob")) == ErrorKind.ACCESS_DENIED
    assert _kind(service.update_password("alice", "Hacked1!", "bob")) == ErrorKind.ACCESS_DENIED
    assert _kind(service.update_login("alice", "mallory", "bob")) == ErrorKind.ACCESS_DENIED


def test_admin_can_update_anyone(service, admin, bob):
    result = service.update_gender("bob", Gender.UNSPECIFIED, "admin")

    assert result.value.gender == Gender.UNSPECIFIED
    assert result.value.modified_by == "admin"


def test_update_missing_user_is_not_found(service, admin):
    assert _kind(service.update_name("ghost", "Ghost", "admin")) == ErrorKind.USER_NOT_FOUND


def test_update_birthday(service, bob):
    result = service.update_birthday("bob", date(1991, 3, 4), "bob")

    assert result.value.birthday == date(1991, 3, 4)


def test_revoked_user_is_immutable(service, admin, bob):
    service.delete_user("bob", soft=True, revoked_by="admin")

    outcomes = [
        service.update_name("bob", "Robert", "admin"),
        service.update_gender("bob", Gender.UNSPECIFIED, "admin"),
        service.update_birthday("bob", date(1990, 1, 1), "admin"),
        service.update_password("bob", "NewPass1!", "bob"),
        service.update_login("bob", "robert", "admin"),
    ]

    assert [_kind(o) for o in outcomes] == [ErrorKind.USER_REVOKED] * 5


def test_update_login_requires_available_login(service, bob, alice):
    assert _kind(service.update_login("bob", "alice", "bob")) == ErrorKind.LOGIN_ALREADY_EXISTS

    result = service.update_login("bob", "robert", "bob")
    assert result.value.login == "robert"
    assert isinstance(service.update_name("robert", "Robert", "robert"), Success)


def test_update_login_race_maps_to_already_exists(service, repo, bob, alice, monkeypatch):
    monkeypatch.setattr(repo, "is_login_available", lambda login: True)

    assert _kind(service.update_login("bob", "alice", "bob")) == ErrorKind.LOGIN_ALREADY_EXISTS


# ---------------------------------------- reads ----------------------------------------
def test_get_user_is_admin_only(service, admin, bob):
    assert service.get_user("bob", "admin").value.login == "bob"
    assert _kind(service.get_user("bob", "bob")) == ErrorKind.ACCESS_DENIED
    assert _kind(service.get_user("ghost", "admin")) == ErrorKind.USER_NOT_FOUND


def test_get_by_credentials(service, admin, bob):
    assert service.get_by_credentials("bob", "Secret1", "bob").value.login == "bob"
    assert _kind(service.get_by_credentials("bob", "Secret1", "alice")) == ErrorKind.ACCESS_DENIED
    assert _kind(service.get_by_credentials("bob", "wrong", "bob")) == ErrorKind.USER_NOT_FOUND
    assert _kind(service.get_by_credentials("ghost", "x", "ghost")) == ErrorKind.USER_NOT_FOUND

    service.delete_user("bob", soft=True, revoked_by="admin")
    assert _kind(service.get_by_credentials("bob", "Secret1", "bob")) == ErrorKind.USER_REVOKED


def test_list_active_users(service, admin, bob, alice):
    service.delete_user("alice", soft=True, revoked_by="admin")

    result = service.list_active_users("admin")

    assert [u.login for u in result.value] == ["admin", "bob"]
    assert _kind(service.list_active_users("bob")) == ErrorKind.ACCESS_DENIED


def test_list_older_than(service, repo, admin):
    repo.create("senior", "Secret1", "Senior", birthday=date(1950, 1, 1))
    repo.create("kid", "Secret1", "Kid", birthday=date.today())

    result = service.list_older_than(18, "admin")

    assert [u.login for u in result.value] == ["senior"]
    assert [u.login for u in service.list_older_than(0, "admin").value] == ["senior", "kid"]
    assert _kind(service.list_older_than(-1, "admin")) == ErrorKind.INVALID_AGE
    assert _kind(service.list_older_than(18, "senior")) == ErrorKind.ACCESS_DENIED


def test_list_older_than_huge_age_is_empty(service, repo, admin):
    repo.create("senior", "Secret1", "Senior", birthday=date(1950, 1, 1))

    result = service.list_older_than(5000, "admin")

    assert isinstance(result, Success)
    assert result.value == []


# ---------------------------------------- delete / restore ----------------------------------------
def test_soft_delete_keeps_record_visible_to_admin(service, admin, bob):
    result = service.delete_user("bob", soft=True, revoked_by="admin")

    assert result.value.login == "bob"
    viewed = service.get_user("bob", "admin").value
    assert viewed.is_active is False
    assert viewed.revoked_by == "admin"


def test_soft_delete_twice_reports_revoked(service, admin, bob):
    service.delete_user("bob", soft=True, revoked_by="admin")

    assert _kind(service.delete_user("bob", soft=True, revoked_by="admin")) == ErrorKind.USER_REVOKED


def test_hard_delete_removes_user(service, admin, bob):
    result = service.delete_user("bob", soft=False, revoked_by="admin")

    assert result.value.login == "bob"
    assert _kind(service.get_user("bob", "admin")) == ErrorKind.USER_NOT_FOUND


def test_hard_delete_of_revoked_user(service, admin, bob):
    service.delete_user("bob", soft=True, revoked_by="admin")

    assert isinstance(service.delete_user("bob", soft=False, revoked_by="admin"), Success)
    assert _kind(service.get_user("bob", "admin")) == ErrorKind.USER_NOT_FOUND


def test_delete_and_restore_are_admin_only(service, admin, bob, alice):
    assert _kind(service.delete_user("alice", soft=True, revoked_by="bob")) == ErrorKind.ACCESS_DENIED
    assert _kind(service.delete_user("bob", soft=True, revoked_by="bob")) == ErrorKind.ACCESS_DENIED
    service.delete_user("alice", soft=True, revoked_by="admin")
    assert _kind(service.restore_user("alice", "bob")) == ErrorKind.ACCESS_DENIED


def test_restore_active_user_is_not_found(service, admin, bob):
    assert _kind(service.restore_user("bob", "admin")) == ErrorKind.USER_NOT_FOUND
    assert _kind(service.restore_user("ghost", "admin")) == ErrorKind.USER_NOT_FOUND


def test_revoke_and_restore_scenario(service, admin, bob):
    service.delete_user("bob", soft=True, revoked_by="admin")
    assert _kind(service.update_password("bob", "NewPass1!", "bob")) == ErrorKind.USER_REVOKED

    restored = service.restore_user("bob", "admin")
    assert restored.value.is_active
    assert restored.value.revoked_on is None
    assert restored.value.revoked_by is None

    assert isinstance(service.update_password("bob", "NewPass1!", "bob"), Success)
    assert service.get_by_credentials("bob", "NewPass1!", "bob").value.login == "bob"
