from typing import Optional, Protocol

from psycopg import sql

from crudkeys import db

# Tables whose keys may be looked up by a generator
KNOWN_COLLECTIONS = frozenset({"employees", "products"})


class KeyStore(Protocol):
    """Storage collaborator a generator queries to avoid collisions."""

    def exists(self, collection: str, candidate: int) -> bool:
        ...

    def max_key(self, collection: str) -> Optional[int]:
        ...


class PostgresKeyStore:
    """
    KeyStore backed by the application database.

    Queries run through crudkeys.db, so inside db.transaction() they share
    the caller's connection and see its uncommitted writes.
    """

    def __init__(self, collections=KNOWN_COLLECTIONS):
        self.collections = frozenset(collections)

    def _table(self, collection: str) -> sql.Identifier:
        if collection not in self.collections:
            raise ValueError(f"Unknown collection {collection!r}")
        return sql.Identifier(collection)

    def exists(self, collection: str, candidate: int) -> bool:
        """Check whether a key is already used in a collection."""
        row = db.fetch_one(
            sql.SQL("SELECT EXISTS (SELECT 1 FROM {} WHERE id = %s) AS taken").format(
                self._table(collection)
            ),
            (candidate,),
        )
        return bool(row["taken"])

    def max_key(self, collection: str) -> Optional[int]:
        """Get the largest key in a collection, or None when it is empty."""
        row = db.fetch_one(
            sql.SQL("SELECT MAX(id) AS max_id FROM {}").format(self._table(collection))
        )
        return row["max_id"] if row else None
