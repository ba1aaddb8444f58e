"""
Jobly API: canonical request surface for companies, jobs and users.

Each function follows the same order as an HTTP route would:
validate the payload, authorize the caller, call the repository, and
shape a JSON-ready response. Framework wiring is left to the host.
"""

from typing import Any, Dict, Mapping, Optional

from .access import Caller, Operation, Resource, ensure_allowed
from .errors import BadRequestError, JoblyError
from .passwords import PasswordEncoder
from .repositories import CompanyRepository, JobRepository, UserRepository
from .schema import (
    COMPANY_NEW,
    COMPANY_UPDATE,
    JOB_NEW,
    JOB_UPDATE,
    USER_NEW,
    USER_REGISTER,
    USER_UPDATE,
    validate_or_raise,
)
from .store import Store


def parse_job_id(raw: Any) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise BadRequestError(f"Job id must be an integer, got {raw!r}")


def _reject_key_change(data: Mapping[str, Any], key: str) -> None:
    if "id" in data or key in data:
        raise BadRequestError("Cannot change ID")


class JoblyAPI:
    """
    Route-level operations bound to one store.

    Args:
        store: Store shared by all repositories
        encoder: Password encoder used for user records
    """

    def __init__(self, store: Store, encoder: PasswordEncoder):
        self.store = store
        self.logger = store.logger
        self.companies = CompanyRepository(store)
        self.jobs = JobRepository(store)
        self.users = UserRepository(store, encoder)

    def _deny_logged(self, operation: Operation, resource: Resource, caller: Caller,
                     owner: Optional[str] = None) -> None:
        try:
            ensure_allowed(operation, resource, caller, owner)
        except JoblyError as e:
            self.logger.record_error(e.kind.value)
            self.logger.warning("Access denied", operation=operation.value,
                                resource=resource.value, caller=caller.username)
            raise

    # companies

    def create_company(self, caller: Caller, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.CREATE, Resource.COMPANY, caller)
        validate_or_raise(data, COMPANY_NEW)
        return {"company": self.companies.create(data)}

    def list_companies(self, caller: Caller, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        self._deny_logged(Operation.LIST, Resource.COMPANY, caller)
        return {"companies": self.companies.find_all(filters)}

    def get_company(self, caller: Caller, handle: str) -> Dict[str, Any]:
        self._deny_logged(Operation.GET, Resource.COMPANY, caller)
        return {"company": self.companies.get(handle)}

    def update_company(self, caller: Caller, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.UPDATE, Resource.COMPANY, caller)
        _reject_key_change(data, "handle")
        validate_or_raise(data, COMPANY_UPDATE)
        return {"company": self.companies.update(handle, data)}

    def delete_company(self, caller: Caller, handle: str) -> Dict[str, Any]:
        self._deny_logged(Operation.DELETE, Resource.COMPANY, caller)
        self.companies.remove(handle)
        return {"deleted": handle}

    # jobs

    def create_job(self, caller: Caller, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.CREATE, Resource.JOB, caller)
        validate_or_raise(data, JOB_NEW)
        return {"job": self.jobs.create(data)}

    def list_jobs(self, caller: Caller, filters: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        self._deny_logged(Operation.LIST, Resource.JOB, caller)
        return {"jobs": self.jobs.find_all(filters)}

    def get_job(self, caller: Caller, job_id: Any) -> Dict[str, Any]:
        self._deny_logged(Operation.GET, Resource.JOB, caller)
        return {"job": self.jobs.get(parse_job_id(job_id))}

    def update_job(self, caller: Caller, job_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.UPDATE, Resource.JOB, caller)
        _reject_key_change(data, "id")
        validate_or_raise(data, JOB_UPDATE)
        return {"job": self.jobs.update(parse_job_id(job_id), data)}

    def delete_job(self, caller: Caller, job_id: Any) -> Dict[str, Any]:
        self._deny_logged(Operation.DELETE, Resource.JOB, caller)
        job_id = parse_job_id(job_id)
        self.jobs.remove(job_id)
        return {"deleted": job_id}

    # users

    def create_user(self, caller: Caller, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Admin-only; the new user may itself be an admin."""
        self._deny_logged(Operation.CREATE, Resource.USER, caller)
        validate_or_raise(data, USER_NEW)
        return {"user": self.users.create(data)}

    def register(self, caller: Caller, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.REGISTER, Resource.USER, caller)
        validate_or_raise(data, USER_REGISTER)
        return {"user": self.users.register(data)}

    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        return {"user": self.users.authenticate(username, password)}

    def list_users(self, caller: Caller) -> Dict[str, Any]:
        self._deny_logged(Operation.LIST, Resource.USER, caller)
        return {"users": self.users.find_all()}

    def get_user(self, caller: Caller, username: str) -> Dict[str, Any]:
        self._deny_logged(Operation.GET, Resource.USER, caller, owner=username)
        return {"user": self.users.get(username)}

    def update_user(self, caller: Caller, username: str, data: Mapping[str, Any]) -> Dict[str, Any]:
        self._deny_logged(Operation.UPDATE, Resource.USER, caller, owner=username)
        _reject_key_change(data, "username")
        validate_or_raise(data, USER_UPDATE)
        return {"user": self.users.update(username, data)}

    def delete_user(self, caller: Caller, username: str) -> Dict[str, Any]:
        self._deny_logged(Operation.DELETE, Resource.USER, caller, owner=username)
        self.users.remove(username)
        return {"deleted": username}

    def apply(self, caller: Caller, username: str, job_id: Any) -> Dict[str, Any]:
        self._deny_logged(Operation.APPLY, Resource.USER, caller, owner=username)
        return self.users.apply(username, parse_job_id(job_id))
