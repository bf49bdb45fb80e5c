"""SQLAlchemy Declarative Base — the metadata every model and migration shares.

Invariants:
    - All models inherit from Base
    - Indexes, uniques and foreign keys get deterministic names from NAMING_CONVENTION,
      so SQLite batch migrations can find them again
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)
