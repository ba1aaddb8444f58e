"""
Jobs Repository.

Responsibilities:
- CRUD operations for the jobs table.
- Title / salary / equity filtering.

Invariant:
Job ids are assigned by the store and never change.
"""

from ..sql import FilterField, FilterMode, FilterSpec
from .base import Repository

NO_EQUITY = 0

JOB_FILTERS = FilterSpec((
    FilterField("title", "title", FilterMode.CONTAINS),
    FilterField("minSalary", "salary", FilterMode.MIN, int),
    FilterField("hasEquity", "equity", FilterMode.PRESENCE, sentinel=NO_EQUITY, cast="NUMERIC"),
))


class JobRepository(Repository):
    resource = "job"
    table = "jobs"
    key = "id"
    columns = {
        "id": "id",
        "title": "title",
        "salary": "salary",
        "equity": "equity",
        "companyHandle": "company_handle",
    }
    creatable = ("title", "salary", "equity", "companyHandle")
    mutable = ("title", "salary", "equity")
    filter_spec = JOB_FILTERS

    def find_by_company(self, handle: str):
        """Jobs posted by one company, without the company handle."""
        rows = self.store.query(
            """SELECT id, title, salary, equity
               FROM jobs
               WHERE company_handle = :p1
               ORDER BY id""",
            [handle],
        )
        return rows

    def exists(self, job_id) -> bool:
        rows = self.store.query("SELECT id FROM jobs WHERE id = :p1", [job_id])
        return bool(rows)
