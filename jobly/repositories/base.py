"""
Repository base.

Responsibilities:
- Generic create / find_all / get / update / remove against one table.
- Existence checks (NotFound) and key immutability (BadRequest).
- Compile caller input with jobly.sql; execute through the injected Store.

Non-Responsibilities:
- No authorization (see jobly.access).
- No payload shape validation (see jobly.schema).

Invariant:
Every mutation is a single statement; nothing spans repository calls.
"""

from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import BadRequestError, NotFoundError, StoreFailure
from ..sql import FilterSpec, compile_filters, placeholder, sql_for_partial_update
from ..store import Store


class Repository:
    """
    CRUD over a single table, configured by class attributes.

    Subclasses declare:
        resource: Name used in logs and error messages
        table: Physical table name
        key: Logical name of the primary key
        columns: Logical field -> physical column, in SELECT order (key first)
        creatable: Fields accepted by ``create``
        mutable: Fields accepted by ``update``
        filter_spec: Filters accepted by ``find_all``
    """

    resource: str = ""
    table: str = ""
    key: str = "id"
    columns: Dict[str, str] = {}
    creatable: Tuple[str, ...] = ()
    mutable: Tuple[str, ...] = ()
    filter_spec: FilterSpec = FilterSpec(())

    def __init__(self, store: Store):
        self.store = store
        self.logger = store.logger

    # helpers

    @property
    def key_column(self) -> str:
        return self.columns[self.key]

    def column_for(self, name: str) -> str:
        """Physical column for a logical field; unmapped fields keep their name."""
        return self.columns.get(name, name)

    def select_list(self) -> str:
        return ", ".join(f'{col} AS "{name}"' for name, col in self.columns.items())

    def to_record(self, row: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for per-resource row conversion."""
        return row

    def not_found(self, key: Any) -> NotFoundError:
        self.logger.record_error(NotFoundError.kind.value)
        return NotFoundError(f"No {self.resource}: {key}")

    def bad_request(self, message: str) -> BadRequestError:
        self.logger.record_error(BadRequestError.kind.value)
        return BadRequestError(message)

    def _reject_unknown(self, data: Mapping[str, Any], allowed: Tuple[str, ...]) -> None:
        unknown = [k for k in data if k not in allowed]
        if unknown:
            raise self.bad_request(f"Unsupported {self.resource} field(s): {', '.join(unknown)}")

    # operations

    def create(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Insert a new row and return the stored record.

        Raises:
            BadRequestError: unknown fields, or the store rejected the row
                (duplicate key, missing company, NOT NULL violation)
        """
        self.logger.record_operation(self.resource, "create")
        self._reject_unknown(data, self.creatable)
        return self._insert(data)

    def _insert(self, data: Mapping[str, Any]) -> Dict[str, Any]:
        if not data:
            raise self.bad_request("No data")

        names = list(data)
        cols = ", ".join(self.column_for(name) for name in names)
        marks = ", ".join(placeholder(idx) for idx in range(1, len(names) + 1))
        sql = f"""INSERT INTO {self.table} ({cols})
                  VALUES ({marks})
                  RETURNING {self.select_list()}"""
        try:
            rows = self.store.query(sql, [data[name] for name in names])
        except StoreFailure as e:
            if e.constraint_violation:
                raise self.bad_request(f"Cannot create {self.resource}: {e.message}") from e
            raise
        record = self.to_record(rows[0])
        self.logger.info(f"Created {self.resource}", key=record[self.key])
        return record

    def find_all(self, filters: Optional[Mapping[str, Any]] = None) -> List[Dict[str, Any]]:
        """
        Return all records, or those matching ``filters``.

        Unrecognized filter names are ignored; no match returns an empty list.
        """
        self.logger.record_operation(self.resource, "find_all")
        predicate = compile_filters(filters, self.filter_spec)
        sql = f"""SELECT {self.select_list()}
                  FROM {self.table}
                  {predicate.where_clause()}
                  ORDER BY {self.key_column}"""
        rows = self.store.query(sql, predicate.params)
        return [self.to_record(row) for row in rows]

    def get(self, key: Any) -> Dict[str, Any]:
        """Return the record for ``key`` or raise NotFoundError."""
        self.logger.record_operation(self.resource, "get")
        rows = self.store.query(
            f"""SELECT {self.select_list()}
                FROM {self.table}
                WHERE {self.key_column} = :p1""",
            [key],
        )
        if not rows:
            raise self.not_found(key)
        return self.to_record(rows[0])

    def update(self, key: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Partial update: only supplied fields change; explicit None sets NULL.

        Raises:
            BadRequestError: key mutation attempted, unknown fields, or empty payload
            NotFoundError: no row with ``key``
        """
        self.logger.record_operation(self.resource, "update")
        if "id" in data or self.key in data:
            raise self.bad_request("Cannot change ID")
        self._reject_unknown(data, self.mutable)

        assignment = sql_for_partial_update(
            data, {name: self.column_for(name) for name in self.mutable})
        sql = f"""UPDATE {self.table}
                  SET {assignment.text}
                  WHERE {self.key_column} = {placeholder(assignment.next_index)}
                  RETURNING {self.select_list()}"""
        rows = self.store.query(sql, [*assignment.params, key])
        if not rows:
            raise self.not_found(key)
        self.logger.info(f"Updated {self.resource}", key=key, fields=list(data))
        return self.to_record(rows[0])

    def remove(self, key: Any) -> None:
        """Delete the row for ``key`` or raise NotFoundError."""
        self.logger.record_operation(self.resource, "remove")
        rows = self.store.query(
            f"""DELETE FROM {self.table}
                WHERE {self.key_column} = :p1
                RETURNING {self.key_column}""",
            [key],
        )
        if not rows:
            raise self.not_found(key)
        self.logger.info(f"Removed {self.resource}", key=key)
