# app/models/migration.py
from sqlalchemy import Column, Integer, Text, text
from app.core.database import Base


class Migration(Base):
    """Append-only ledger of applied schema versions."""

    __tablename__ = "migrations"

    version = Column(Integer, primary_key=True, autoincrement=False)
    applied_at = Column(Text, server_default=text("CURRENT_TIMESTAMP"))

    def __repr__(self):
        return f"<Migration version={self.version} applied_at={self.applied_at}>"
