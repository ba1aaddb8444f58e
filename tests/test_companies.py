"""
Tests for repositories/companies.py - company CRUD and filtering.
"""

import pytest

from jobly.errors import BadRequestError, NotFoundError


def _handles(records):
    return [r["handle"] for r in records]


class TestCreate:

    def test_create(self, companies, new_company):
        assert companies.create(new_company) == new_company
        assert _handles(companies.find_all({"name": "new"})) == ["new"]

    def test_duplicate_handle(self, companies, new_company):
        companies.create(new_company)
        with pytest.raises(BadRequestError):
            companies.create({**new_company, "name": "Other"})

    def test_missing_required_column(self, companies):
        with pytest.raises(BadRequestError):
            companies.create({"handle": "x", "name": "X"})


class TestFindAll:

    def test_no_filter(self, companies):
        result = companies.find_all()
        assert result[0] == {
            "handle": "c1",
            "name": "C1",
            "description": "Desc1",
            "numEmployees": 1,
            "logoUrl": "http://c1.img",
        }
        assert _handles(result) == ["c1", "c2", "c3"]

    def test_filter_by_name(self, companies):
        assert _handles(companies.find_all({"name": "c2"})) == ["c2"]

    def test_filter_by_employee_range(self, companies):
        assert _handles(companies.find_all({"minEmp": "2"})) == ["c2", "c3"]
        assert _handles(companies.find_all({"maxEmp": "2"})) == ["c1", "c2"]
        assert _handles(companies.find_all({"minEmp": "2", "maxEmp": "2"})) == ["c2"]

    def test_inverted_range(self, companies):
        with pytest.raises(BadRequestError):
            companies.find_all({"minEmp": "3", "maxEmp": "1"})

    def test_nothing_matches(self, companies):
        assert companies.find_all({"name": "zzz"}) == []


class TestGet:

    def test_get_includes_jobs(self, companies, job_ids):
        company = companies.get("c1")
        assert company["handle"] == "c1"
        assert company["jobs"] == [
            {"id": job_ids["Title1"], "title": "Title1", "salary": 100000, "equity": "0"},
        ]

    def test_not_found(self, companies):
        with pytest.raises(NotFoundError):
            companies.get("nope")


class TestUpdate:

    def test_update(self, companies):
        company = companies.update("c1", {"name": "New", "numEmployees": 10})
        assert company == {
            "handle": "c1",
            "name": "New",
            "description": "Desc1",
            "numEmployees": 10,
            "logoUrl": "http://c1.img",
        }

    def test_null_fields(self, companies):
        company = companies.update("c1", {"numEmployees": None, "logoUrl": None})
        assert company["numEmployees"] is None
        assert company["logoUrl"] is None

    def test_cannot_change_handle(self, companies):
        with pytest.raises(BadRequestError):
            companies.update("c1", {"handle": "c9"})

    def test_not_found(self, companies):
        with pytest.raises(NotFoundError):
            companies.update("nope", {"name": "x"})

    def test_no_data(self, companies):
        with pytest.raises(BadRequestError):
            companies.update("c1", {})


class TestRemove:

    def test_remove_cascades_to_jobs(self, companies, jobs):
        companies.remove("c1")
        with pytest.raises(NotFoundError):
            companies.get("c1")
        assert [j["companyHandle"] for j in jobs.find_all()] == ["c2", "c3"]

    def test_not_found(self, companies):
        with pytest.raises(NotFoundError):
            companies.remove("nope")
