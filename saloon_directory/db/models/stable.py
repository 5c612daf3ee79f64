from sqlalchemy import BigInteger, Column, Integer, LargeBinary

from saloon_directory.db.base import Base


class StableCell(Base):
    """A single durable integer, addressed by memory id."""

    __tablename__ = "stable_cells"

    memory_id = Column(Integer, primary_key=True, autoincrement=False)
    value = Column(BigInteger, nullable=False)


class StableEntry(Base):
    """One key/value pair of a durable map, addressed by memory id and key."""

    __tablename__ = "stable_entries"

    memory_id = Column(Integer, primary_key=True, autoincrement=False)
    key = Column(BigInteger, primary_key=True, autoincrement=False)
    value = Column(LargeBinary, nullable=False)
