"""
Access gate.

Decides whether a caller may run a repository operation. The gate runs
before any repository call; a denial never touches the store.

Caller states:
- anonymous (no username)
- authenticated as a user
- authenticated admin
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import AuthorizationDenied


class Operation(str, Enum):
    LIST = "list"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    REGISTER = "register"
    APPLY = "apply"


class Resource(str, Enum):
    COMPANY = "company"
    JOB = "job"
    USER = "user"


READ_OPERATIONS = (Operation.LIST, Operation.GET)


@dataclass(frozen=True)
class Caller:
    username: Optional[str] = None
    is_admin: bool = False

    @property
    def is_anonymous(self) -> bool:
        return self.username is None and not self.is_admin

    def owns(self, owner: Optional[str]) -> bool:
        return self.username is not None and owner is not None and self.username == owner


ANONYMOUS = Caller()


def is_allowed(
    operation: Operation,
    resource: Resource,
    caller: Caller,
    owner: Optional[str] = None,
) -> bool:
    """
    Decide whether ``caller`` may run ``operation`` on ``resource``.

    Args:
        operation: Repository operation
        resource: Resource kind
        caller: Who is asking
        owner: Username owning the targeted record (user resources only)
    """
    if caller.is_admin:
        return True

    if resource is Resource.USER:
        if operation is Operation.REGISTER:
            return True
        if operation in (Operation.LIST, Operation.CREATE):
            return False
        return caller.owns(owner)

    # companies and jobs: public reads, admin-only writes
    return operation in READ_OPERATIONS


def ensure_allowed(
    operation: Operation,
    resource: Resource,
    caller: Caller,
    owner: Optional[str] = None,
) -> None:
    """Raise AuthorizationDenied unless ``is_allowed``."""
    if is_allowed(operation, resource, caller, owner):
        return
    if caller.is_anonymous:
        raise AuthorizationDenied(f"Login required to {operation.value} {resource.value}")
    raise AuthorizationDenied(f"{caller.username} may not {operation.value} {resource.value}")
