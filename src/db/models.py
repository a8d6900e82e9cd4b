from sqlalchemy import (
    MetaData,
    Column,
    String,
    BigInteger,
    Integer,
    UniqueConstraint,
    func,
    JSON,
)
from sqlalchemy.types import TIMESTAMP
from sqlalchemy.orm import declarative_base

# Define naming conventions for constraints and indexes
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

metadata = MetaData(naming_convention=convention)
Base = declarative_base(metadata=metadata)


class ScoredAttemptRecord(Base):
    """One canonical computed result per (attempt, record type). Written once."""
    __tablename__ = "scored_attempt_records"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    attempt_id = Column(String(128), nullable=False)
    record_type = Column(String(64), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (
        UniqueConstraint("attempt_id", "record_type"),
    )

    def __repr__(self):
        return f"<ScoredAttemptRecord(attempt_id='{self.attempt_id}', record_type='{self.record_type}')>"
