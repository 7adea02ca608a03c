import logging
from typing import List, Optional

from crudkeys import db
from crudkeys.config import config
from crudkeys.idgen import GenerationContext, PostgresKeyStore, build_generator

logger = logging.getLogger(__name__)

TABLE = "employees"


class EmployeeRepository:
    """
    Repository for employee data access.
    Encapsulates all SQL and queries for the employees table.

    Employee keys come from an identifier generator rather than a database
    sequence. The generator is injected; by default it is the one selected
    by configuration.
    """

    def __init__(self, generator=None, store=None):
        self.generator = generator or build_generator(config)
        self.store = store or PostgresKeyStore()

    def create(self, name: str) -> dict:
        """
        Create a new employee with a generated key.

        Generation and insert run in one transaction under the collection
        lock, so concurrent creators cannot both claim the same key.

        Raises:
            ValueError: If name is empty
            GenerationExhausted: If the generator could not produce a key;
                nothing is inserted
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Employee name is required")

        with db.transaction():
            db.lock_collection(TABLE)
            employee_id = self.generator.generate(GenerationContext(TABLE, self.store))
            employee = db.fetch_one(
                """
                INSERT INTO employees (id, name)
                VALUES (%s, %s)
                RETURNING *
                """,
                (employee_id, name.strip()),
            )

        logger.info("Created employee %s", employee["id"])
        return employee

    def get_by_id(self, employee_id: int) -> Optional[dict]:
        """Get employee by ID."""
        return db.fetch_one("SELECT * FROM employees WHERE id = %s", (employee_id,))

    def list(self) -> List[dict]:
        """List all employees by name."""
        return db.fetch_all("SELECT * FROM employees ORDER BY name, id")

    def count(self) -> int:
        """Count stored employees."""
        return db.fetch_one("SELECT COUNT(*) AS n FROM employees")["n"]

    def update(self, employee_id: int, name: str) -> Optional[dict]:
        """
        Rename an employee. The key is never changed.
        Returns the updated row, or None if no such employee exists.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Employee name is required")
        return db.fetch_one(
            """
            UPDATE employees
            SET name = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING *
            """,
            (name.strip(), employee_id),
        )

    def delete(self, employee_id: int) -> bool:
        """Delete an employee. Returns True if a row was removed."""
        deleted = db.execute("DELETE FROM employees WHERE id = %s", (employee_id,))
        if deleted:
            logger.info("Deleted employee %s", employee_id)
        return deleted > 0
