"""
Users Repository.

Responsibilities:
- CRUD operations for the users table.
- Registration and authentication through an injected PasswordEncoder.
- Job applications.

Invariant:
Password hashes never leave this module.
"""

from typing import Any, Dict, Mapping

from ..errors import StoreFailure, UnauthorizedError
from ..passwords import PasswordEncoder
from ..store import Store
from .base import Repository
from .jobs import JobRepository


class UserRepository(Repository):
    resource = "user"
    table = "users"
    key = "username"
    columns = {
        "username": "username",
        "firstName": "first_name",
        "lastName": "last_name",
        "email": "email",
        "isAdmin": "is_admin",
    }
    creatable = ("username", "password", "firstName", "lastName", "email", "isAdmin")
    mutable = ("password", "firstName", "lastName", "email")

    def __init__(self, store: Store, encoder: PasswordEncoder):
        super().__init__(store)
        self.encoder = encoder

    def to_record(self, row: Dict[str, Any]) -> Dict[str, Any]:
        # SQLite hands booleans back as 0/1
        record = dict(row)
        record["isAdmin"] = bool(record["isAdmin"])
        return record

    def _hash_password(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        fields = dict(data)
        if fields.get("password") is not None:
            fields["password"] = self.encoder.hash(fields["password"])
        return fields

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Create a user, hashing the supplied password.

        Raises:
            BadRequestError: unknown fields, missing fields or duplicate username
        """
        self.logger.record_operation(self.resource, "create")
        self._reject_unknown(data, self.creatable)
        fields = self._hash_password(data)
        fields.setdefault("isAdmin", False)
        return self._insert(fields)

    def register(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Self-service signup; never creates an admin."""
        return self.create({**data, "isAdmin": False})

    def authenticate(self, username: str, password: str) -> Dict[str, Any]:
        """
        Return the user if ``password`` matches.

        Raises:
            UnauthorizedError: unknown user or wrong password
        """
        self.logger.record_operation(self.resource, "authenticate")
        rows = self.store.query(
            f"""SELECT {self.select_list()}, password AS "password"
                FROM users
                WHERE username = :p1""",
            [username],
        )
        if rows and self.encoder.verify(password, rows[0]["password"]):
            user = self.to_record(rows[0])
            del user["password"]
            return user
        self.logger.record_error(UnauthorizedError.kind.value)
        raise UnauthorizedError("Invalid username/password")

    def get(self, key: Any) -> Dict[str, Any]:
        """User record plus ``jobs``: [{id, title, salary, equity, companyHandle}, ...] applied to."""
        user = super().get(key)
        user["jobs"] = self.store.query(
            """SELECT j.id AS "id",
                      j.title AS "title",
                      j.salary AS "salary",
                      j.equity AS "equity",
                      j.company_handle AS "companyHandle"
               FROM applications AS a
               JOIN jobs AS j ON j.id = a.job_id
               WHERE a.username = :p1
               ORDER BY j.id""",
            [key],
        )
        return user

    def update(self, key: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        """Partial update; a supplied password is hashed before storage."""
        return super().update(key, self._hash_password(data))

    def apply(self, username: str, job_id: int) -> Dict[str, Any]:
        """
        Record that ``username`` applied to ``job_id``.

        Raises:
            NotFoundError: unknown user or job
            BadRequestError: already applied
        """
        self.logger.record_operation(self.resource, "apply")
        jobs = JobRepository(self.store)
        if not jobs.exists(job_id):
            raise jobs.not_found(job_id)
        if not self.store.query("SELECT username FROM users WHERE username = :p1", [username]):
            raise self.not_found(username)
        try:
            self.store.query(
                """INSERT INTO applications (username, job_id)
                   VALUES (:p1, :p2)""",
                [username, job_id],
            )
        except StoreFailure as e:
            if e.constraint_violation:
                raise self.bad_request(f"{username} already applied to job {job_id}") from e
            raise
        self.logger.info("Recorded application", username=username, job_id=job_id)
        return {"applied": job_id}
