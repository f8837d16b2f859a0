"""SQLAlchemy database models for the customers service."""

from sqlalchemy import BigInteger, Column, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Customer(Base):
    """A customer row.

    The table itself is created by ``schema.sql`` (see
    :mod:`src.models.schema`), not by ``Base.metadata.create_all``.
    """

    __tablename__ = "customers"

    # BIGSERIAL in schema.sql; the database assigns it on insert
    id = Column(BigInteger, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "email": self.email}

    def __repr__(self) -> str:
        return f"<Customer id={self.id!r} name={self.name!r} email={self.email!r}>"


__all__ = ["Base", "Customer"]
