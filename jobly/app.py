import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from . import __version__
from .access import ANONYMOUS, Caller
from .api import JoblyAPI
from .database import init_database
from .env import get_bcrypt_rounds, get_database_url, get_log_level, load_env
from .errors import ErrorKind, JoblyError
from .logger import get_logger
from .passwords import BcryptPasswordEncoder
from .seed import load_seed_file, seed
from .store import Store


def parse_filters(pairs: Optional[List[str]]) -> Dict[str, str]:
    filters: Dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise SystemExit(f"Filters must look like key=value, got: {pair}")
        k, v = pair.split("=", 1)
        filters[k.strip()] = v.strip()
    return filters


def parse_data(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SystemExit(f"--data is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise SystemExit("--data must be a JSON object")
    return data


def build_caller(args: argparse.Namespace) -> Caller:
    if args.as_user is None and not args.admin:
        return ANONYMOUS
    return Caller(username=args.as_user, is_admin=args.admin)


def build_api(args: argparse.Namespace) -> JoblyAPI:
    logger = get_logger(level=args.log_level)
    engine = init_database(args.db)
    return JoblyAPI(Store(engine, logger), BcryptPasswordEncoder(rounds=get_bcrypt_rounds()))


def emit(payload: Dict[str, Any]) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_init_db(args: argparse.Namespace) -> None:
    init_database(args.db)
    print(f"Initialized database: {args.db}")


def cmd_seed(args: argparse.Namespace) -> None:
    input_path = Path(args.input)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    data = load_seed_file(input_path)
    api = build_api(args)
    summary = seed(data, api.store, api.users.encoder, dry_run=args.dry_run)
    for section, counts in summary.items():
        print(f"{section}: created={counts['created']} skipped={counts['skipped']}")


def cmd_companies(args: argparse.Namespace) -> None:
    api = build_api(args)
    caller = build_caller(args)
    action = args.action
    if action == "list":
        emit(api.list_companies(caller, parse_filters(args.filter)))
    elif action == "get":
        emit(api.get_company(caller, args.key))
    elif action == "create":
        emit(api.create_company(caller, parse_data(args.data)))
    elif action == "update":
        emit(api.update_company(caller, args.key, parse_data(args.data)))
    elif action == "delete":
        emit(api.delete_company(caller, args.key))


def cmd_jobs(args: argparse.Namespace) -> None:
    api = build_api(args)
    caller = build_caller(args)
    action = args.action
    if action == "list":
        emit(api.list_jobs(caller, parse_filters(args.filter)))
    elif action == "get":
        emit(api.get_job(caller, args.key))
    elif action == "create":
        emit(api.create_job(caller, parse_data(args.data)))
    elif action == "update":
        emit(api.update_job(caller, args.key, parse_data(args.data)))
    elif action == "delete":
        emit(api.delete_job(caller, args.key))


def cmd_users(args: argparse.Namespace) -> None:
    api = build_api(args)
    caller = build_caller(args)
    action = args.action
    if action == "list":
        emit(api.list_users(caller))
    elif action == "get":
        emit(api.get_user(caller, args.key))
    elif action == "create":
        emit(api.create_user(caller, parse_data(args.data)))
    elif action == "register":
        emit(api.register(caller, parse_data(args.data)))
    elif action == "update":
        emit(api.update_user(caller, args.key, parse_data(args.data)))
    elif action == "delete":
        emit(api.delete_user(caller, args.key))
    elif action == "apply":
        emit(api.apply(caller, args.key, args.job_id))
    elif action == "login":
        emit(api.authenticate(args.key, args.password))


def _add_resource_parser(subparsers, name: str, help_text: str, func, extra_actions=(), filterable=True) -> None:
    res = subparsers.add_parser(name, help=help_text)
    actions = res.add_subparsers(dest="action", required=True)

    lst = actions.add_parser("list", help=f"List {name}")
    if filterable:
        lst.add_argument("--filter", action="append", metavar="KEY=VALUE", help="Filter (repeatable)")

    get = actions.add_parser("get", help=f"Show one of {name}")
    get.add_argument("key")

    crt = actions.add_parser("create", help=f"Create one of {name}")
    crt.add_argument("--data", required=True, help="JSON object with the new record")

    upd = actions.add_parser("update", help=f"Partially update one of {name}")
    upd.add_argument("key")
    upd.add_argument("--data", required=True, help="JSON object with the fields to change")

    dlt = actions.add_parser("delete", help=f"Delete one of {name}")
    dlt.add_argument("key")

    for action_name, action_help, args_spec in extra_actions:
        extra = actions.add_parser(action_name, help=action_help)
        for arg, kwargs in args_spec:
            extra.add_argument(arg, **kwargs)

    res.set_defaults(func=func)


def main(argv: Optional[List[str]] = None):
    load_env()
    parser = argparse.ArgumentParser(prog="jobly", description="Jobly: companies, jobs and users")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--db", default=get_database_url(), help="Database URL (or set JOBLY_DATABASE_URL)")
    parser.add_argument("--log-level", default=get_log_level(), help="Log level (or set JOBLY_LOG_LEVEL)")
    parser.add_argument("--as-user", help="Act as this username")
    parser.add_argument("--admin", action="store_true", help="Act with admin rights")

    subparsers = parser.add_subparsers(dest="command")

    init = subparsers.add_parser("init-db", help="Create tables")
    init.set_defaults(func=cmd_init_db)

    sd = subparsers.add_parser("seed", help="Load companies, jobs and users from a JSON file")
    sd.add_argument("--input", required=True, help="Path to seed JSON")
    sd.add_argument("--dry-run", action="store_true", help="Count records without writing")
    sd.set_defaults(func=cmd_seed)

    _add_resource_parser(subparsers, "companies", "Manage companies", cmd_companies)
    _add_resource_parser(subparsers, "jobs", "Manage jobs", cmd_jobs)
    _add_resource_parser(
        subparsers,
        "users",
        "Manage users",
        cmd_users,
        filterable=False,
        extra_actions=(
            ("register", "Sign up as a regular user",
             [("--data", {"required": True, "help": "JSON object with the new user"})]),
            ("apply", "Apply a user to a job",
             [("key", {}), ("job_id", {})]),
            ("login", "Check a username/password pair",
             [("key", {}), ("--password", {"required": True})]),
        ),
    )

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if not hasattr(args, "func"):
        parser.print_help()
        return

    try:
        args.func(args)
    except JoblyError as e:
        print(f"Error ({e.status}): {e.message}", file=sys.stderr)
        raise SystemExit(1 if e.kind is ErrorKind.STORE_FAILURE else 2)


if __name__ == "__main__":
    main()
