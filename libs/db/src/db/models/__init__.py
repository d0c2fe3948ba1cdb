"""SQLAlchemy models registry for the Financy database.

Covers the ledger tables read by ``financy.store``.
"""

from .finance import Base, CategoryRecord, TransactionRecord

__all__ = [
    "Base",
    "CategoryRecord",
    "TransactionRecord",
]
