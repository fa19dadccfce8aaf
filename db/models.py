"""
CardBox – SQLAlchemy ORM Models
================================
A single key-value table.  Each row is a *durable slot* holding one
JSON-serialised list (collections or cards) under a versioned key.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


# ---------------------------------------------------------------------------
# Slot – one named record of local key-value storage
# ---------------------------------------------------------------------------
class Slot(Base):
    __tablename__ = "kv_slots"

    key = Column(String(128), primary_key=True)
    payload = Column(Text, nullable=False, default="[]")

    def __repr__(self) -> str:
        return f"<Slot key={self.key!r} size={len(self.payload or '')}>"
