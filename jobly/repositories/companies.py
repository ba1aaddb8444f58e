"""
Companies Repository.

Responsibilities:
- CRUD operations for the companies table.
- Name / employee-count filtering.
- Attaching a company's jobs on lookup.
"""

from typing import Any, Dict

from ..sql import FilterField, FilterMode, FilterSpec
from .base import Repository
from .jobs import JobRepository

COMPANY_FILTERS = FilterSpec((
    FilterField("name", "name", FilterMode.CONTAINS),
    FilterField("minEmp", "num_employees", FilterMode.MIN, int),
    FilterField("maxEmp", "num_employees", FilterMode.MAX, int),
))


class CompanyRepository(Repository):
    resource = "company"
    table = "companies"
    key = "handle"
    columns = {
        "handle": "handle",
        "name": "name",
        "description": "description",
        "numEmployees": "num_employees",
        "logoUrl": "logo_url",
    }
    creatable = ("handle", "name", "description", "numEmployees", "logoUrl")
    mutable = ("name", "description", "numEmployees", "logoUrl")
    filter_spec = COMPANY_FILTERS

    def get(self, key: Any) -> Dict[str, Any]:
        """Company record plus ``jobs``: [{id, title, salary, equity}, ...]."""
        company = super().get(key)
        company["jobs"] = JobRepository(self.store).find_by_company(key)
        return company
