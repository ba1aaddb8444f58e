"""
Pytest configuration and shared fixtures.
"""

import pytest
from typing import Dict, Any

from jobly.access import Caller
from jobly.api import JoblyAPI
from jobly.database import init_database, sqlite_url
from jobly.logger import StructuredLogger, reset_logger
from jobly.passwords import BcryptPasswordEncoder
from jobly.repositories import CompanyRepository, JobRepository, UserRepository
from jobly.store import Store


@pytest.fixture(autouse=True)
def _fresh_global_logger():
    reset_logger()
    yield
    reset_logger()


@pytest.fixture
def test_logger(tmp_path) -> StructuredLogger:
    """Logger writing only to a temporary directory."""
    return StructuredLogger(
        name="jobly-test",
        level="DEBUG",
        log_dir=tmp_path / "logs",
        enable_console=False,
    )


@pytest.fixture
def db_url(tmp_path) -> str:
    return sqlite_url(tmp_path / "jobly-test.db")


@pytest.fixture
def store(db_url, test_logger) -> Store:
    """Store over an empty, initialized database."""
    engine = init_database(db_url)
    yield Store(engine, test_logger)
    engine.dispose()


@pytest.fixture
def encoder() -> BcryptPasswordEncoder:
    # low cost keeps the suite fast
    return BcryptPasswordEncoder(rounds=4)


@pytest.fixture
def seeded_store(store, encoder) -> Store:
    """
    Store with three companies, three jobs and two users.

    c1 / Title1: salary 100000, equity "0"
    c2 / Title2: salary 200000, equity "0.5"
    c3 / Title3: salary 300000, equity "1"
    u1: regular user, u2: admin (passwords "password1" / "password2")
    """
    for n in (1, 2, 3):
        store.query(
            """INSERT INTO companies (handle, name, num_employees, description, logo_url)
               VALUES (:p1, :p2, :p3, :p4, :p5)""",
            [f"c{n}", f"C{n}", n, f"Desc{n}", f"http://c{n}.img"],
        )
    for n in (1, 2, 3):
        store.query(
            """INSERT INTO jobs (title, salary, equity, company_handle)
               VALUES (:p1, :p2, :p3, :p4)""",
            [f"Title{n}", n * 100000, ["0", "0.5", "1"][n - 1], f"c{n}"],
        )
    for n, is_admin in ((1, False), (2, True)):
        store.query(
            """INSERT INTO users (username, password, first_name, last_name, email, is_admin)
               VALUES (:p1, :p2, :p3, :p4, :p5, :p6)""",
            [f"u{n}", encoder.hash(f"password{n}"), f"U{n}F", f"U{n}L", f"user{n}@user.com", is_admin],
        )
    return store


@pytest.fixture
def job_ids(seeded_store) -> Dict[str, int]:
    """Title -> id for the seeded jobs."""
    rows = seeded_store.query("SELECT id, title FROM jobs ORDER BY id")
    return {row["title"]: row["id"] for row in rows}


@pytest.fixture
def jobs(seeded_store) -> JobRepository:
    return JobRepository(seeded_store)


@pytest.fixture
def companies(seeded_store) -> CompanyRepository:
    return CompanyRepository(seeded_store)


@pytest.fixture
def users(seeded_store, encoder) -> UserRepository:
    return UserRepository(seeded_store, encoder)


@pytest.fixture
def api(seeded_store, encoder) -> JoblyAPI:
    return JoblyAPI(seeded_store, encoder)


@pytest.fixture
def anon() -> Caller:
    return Caller()


@pytest.fixture
def u1() -> Caller:
    return Caller(username="u1")


@pytest.fixture
def admin() -> Caller:
    return Caller(username="u2", is_admin=True)


@pytest.fixture
def new_job() -> Dict[str, Any]:
    return {
        "title": "NewTitle",
        "salary": 400000,
        "equity": "0.75",
        "companyHandle": "c1",
    }


@pytest.fixture
def new_company() -> Dict[str, Any]:
    return {
        "handle": "new",
        "name": "New",
        "description": "New Description",
        "numEmployees": 10,
        "logoUrl": "http://new.img",
    }


@pytest.fixture
def new_user() -> Dict[str, Any]:
    return {
        "username": "new",
        "password": "password",
        "firstName": "Test",
        "lastName": "Tester",
        "email": "test@test.com",
    }
