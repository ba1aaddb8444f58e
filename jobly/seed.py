"""
Load companies, jobs and users from a JSON file into the database.

Input shape:
    {"companies": [{...}], "jobs": [{...}], "users": [{...}]}

Records go through the repositories, so passwords are hashed and the same
constraints apply as for any other create. Records rejected by the store are
skipped and counted.
"""

import json
from pathlib import Path
from typing import Any, Dict

from .errors import BadRequestError
from .passwords import PasswordEncoder
from .repositories import CompanyRepository, JobRepository, UserRepository
from .store import Store

SECTIONS = ("companies", "jobs", "users")


def load_seed_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise BadRequestError(f"Seed file must contain a JSON object: {path}")
    return data


def seed(data: Dict[str, Any], store: Store, encoder: PasswordEncoder, dry_run: bool = False) -> Dict[str, Dict[str, int]]:
    """
    Insert every record in ``data``.

    Companies are loaded before jobs so job rows can reference them.

    Args:
        data: Parsed seed file
        store: Target store
        encoder: Password encoder for user records
        dry_run: Count records without writing

    Returns:
        Per-section counts: {"companies": {"created": n, "skipped": m}, ...}
    """
    logger = store.logger
    repos = {
        "companies": CompanyRepository(store),
        "jobs": JobRepository(store),
        "users": UserRepository(store, encoder),
    }
    summary = {}
    for section in SECTIONS:
        records = data.get(section, [])
        created = skipped = 0
        for record in records:
            if dry_run:
                created += 1
                continue
            try:
                repos[section].create(record)
                created += 1
            except BadRequestError as e:
                logger.warning("Skipping seed record", section=section, error=e.message)
                skipped += 1
        summary[section] = {"created": created, "skipped": skipped}
        logger.info(f"Seeded {section}", created=created, skipped=skipped, dry_run=dry_run)
    return summary
