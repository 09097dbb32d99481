"""
# Database Package

The `campushub.database` package provides the persistence layer, built on **Motor**.

The `db_manager` instance is a **module-level singleton**: it is created at import time without
any I/O and connected during application startup via `db_manager.connect()`.

```python
from campushub.database import db_manager

users = db_manager.get_collection("users")
user = await users.find_one({"username": "alice"})
```

Attributes:
    db_manager (DatabaseManager): The global singleton instance for database access.
    DatabaseManager (class): The main manager class (exported for type hinting).
"""

from campushub.database.manager import DatabaseManager, db_manager

__all__ = ["DatabaseManager", "db_manager"]
