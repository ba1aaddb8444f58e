"""
Tests for access.py - the access gate.
"""

import pytest

from jobly.access import ANONYMOUS, Caller, Operation, Resource, ensure_allowed, is_allowed
from jobly.errors import AuthorizationDenied, ErrorKind

USER = Caller(username="u1")
OTHER = Caller(username="u3")
ADMIN = Caller(username="u2", is_admin=True)

WRITES = [Operation.CREATE, Operation.UPDATE, Operation.DELETE]


class TestCompaniesAndJobs:

    @pytest.mark.parametrize("resource", [Resource.COMPANY, Resource.JOB])
    @pytest.mark.parametrize("operation", [Operation.LIST, Operation.GET])
    @pytest.mark.parametrize("caller", [ANONYMOUS, USER, ADMIN])
    def test_reads_open_to_everyone(self, resource, operation, caller):
        assert is_allowed(operation, resource, caller)

    @pytest.mark.parametrize("resource", [Resource.COMPANY, Resource.JOB])
    @pytest.mark.parametrize("operation", WRITES)
    def test_writes_need_admin(self, resource, operation):
        assert not is_allowed(operation, resource, ANONYMOUS)
        assert not is_allowed(operation, resource, USER)
        assert is_allowed(operation, resource, ADMIN)


class TestUsers:

    @pytest.mark.parametrize("operation", [Operation.GET, Operation.UPDATE, Operation.DELETE, Operation.APPLY])
    def test_owner_or_admin(self, operation):
        assert is_allowed(operation, Resource.USER, USER, owner="u1")
        assert is_allowed(operation, Resource.USER, ADMIN, owner="u1")
        assert not is_allowed(operation, Resource.USER, OTHER, owner="u1")
        assert not is_allowed(operation, Resource.USER, ANONYMOUS, owner="u1")

    def test_list_and_create_admin_only(self):
        for operation in (Operation.LIST, Operation.CREATE):
            assert not is_allowed(operation, Resource.USER, USER, owner="u1")
            assert is_allowed(operation, Resource.USER, ADMIN)

    def test_register_open(self):
        assert is_allowed(Operation.REGISTER, Resource.USER, ANONYMOUS)

    def test_missing_owner_denies(self):
        assert not is_allowed(Operation.GET, Resource.USER, USER)


class TestEnsureAllowed:

    def test_passes(self):
        ensure_allowed(Operation.GET, Resource.JOB, ANONYMOUS)

    def test_anonymous_denied(self):
        with pytest.raises(AuthorizationDenied) as exc:
            ensure_allowed(Operation.CREATE, Resource.JOB, ANONYMOUS)
        assert exc.value.kind is ErrorKind.FORBIDDEN
        assert exc.value.status == 403
        assert "Login required" in exc.value.message

    def test_user_denied(self):
        with pytest.raises(AuthorizationDenied) as exc:
            ensure_allowed(Operation.UPDATE, Resource.USER, OTHER, owner="u1")
        assert "u3" in exc.value.message

    def test_anonymous_flag(self):
        assert ANONYMOUS.is_anonymous
        assert not USER.is_anonymous
        assert not Caller(is_admin=True).is_anonymous
