from decimal import Decimal
from typing import List, Optional

from psycopg import sql

from crudkeys import db

UPDATABLE_FIELDS = ("name", "description", "price")


class ProductRepository:
    """
    Repository for product data access.
    Encapsulates all SQL and queries for the products table.

    Product keys are assigned by the caller.
    """

    def create(
        self,
        product_id: int,
        name: str,
        description: str = None,
        price: Decimal = None,
    ) -> dict:
        """Create a new product. Raises UniqueViolation if the id is taken."""
        return db.fetch_one(
            """
            INSERT INTO products (id, name, description, price)
            VALUES (%s, %s, %s, %s)
            RETURNING *
            """,
            (product_id, name, description, price),
        )

    def create_many(self, products: List[dict]) -> int:
        """Insert several products at once. Returns the number of rows inserted."""
        return db.execute_many(
            """
            INSERT INTO products (id, name, description, price)
            VALUES (%s, %s, %s, %s)
            """,
            [(p["id"], p["name"], p.get("description"), p.get("price")) for p in products],
        )

    def get_by_id(self, product_id: int) -> Optional[dict]:
        """Get product by ID."""
        return db.fetch_one("SELECT * FROM products WHERE id = %s", (product_id,))

    def list(self) -> List[dict]:
        """List all products by ID."""
        return db.fetch_all("SELECT * FROM products ORDER BY id")

    def update(self, product_id: int, **fields) -> Optional[dict]:
        """
        Update name, description and/or price of a product.
        Returns the updated row, or None if no such product exists.
        """
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Cannot update product fields: {', '.join(sorted(unknown))}")
        if not fields:
            raise ValueError("No product fields to update")

        columns = [f for f in UPDATABLE_FIELDS if f in fields]
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in columns
        )
        return db.fetch_one(
            sql.SQL(
                "UPDATE products SET {}, updated_at = NOW() WHERE id = %s RETURNING *"
            ).format(assignments),
            (*[fields[column] for column in columns], product_id),
        )

    def delete(self, product_id: int) -> bool:
        """Delete a product. Returns True if a row was removed."""
        return db.execute("DELETE FROM products WHERE id = %s", (product_id,)) > 0
