"""
Declarative base shared by every Gestio table.

Each table gets an integer surrogate key and audit timestamps. The surrogate
key only means something inside one database file: migration packages
identify rows by their natural keys (codes, type plus number) instead.
"""

from sqlalchemy import Column, DateTime, Integer
from sqlalchemy.orm import declarative_base

from src.utils.datetime_utils import utc_now

Base = declarative_base()


class BaseModel(Base):
    """
    Abstract base model.

    Attributes:
        id: Surrogate primary key, assigned by the database
        created_at: Insert timestamp (UTC)
        updated_at: Last update timestamp (UTC)
    """

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self) -> str:
        code = getattr(self, "code", None)
        if code is not None:
            return f"{self.__class__.__name__}(id={self.id}, code={code!r})"
        return f"{self.__class__.__name__}(id={self.id})"
