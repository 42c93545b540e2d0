"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - Imported here so Base.metadata knows every table before create_all runs
"""

from notechain.models.kv_entry import KeyValueEntry  # noqa: F401
