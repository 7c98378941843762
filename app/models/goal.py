# app/models/goal.py
import uuid
from sqlalchemy import Column, String, Float, Date, DateTime, Text, CheckConstraint, func
from app.core.database import Base
from app.models.transaction import MAX_AMOUNT

HEX_COLOR_GLOB = "#" + "[0-9A-Fa-f]" * 6


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint("length(name) >= 1 AND length(name) <= 100", name="ck_goals_name_length"),
        CheckConstraint(f"target_amount > 0 AND target_amount <= {MAX_AMOUNT}", name="ck_goals_target_amount_range"),
        CheckConstraint(f"current_amount >= 0 AND current_amount <= {MAX_AMOUNT}", name="ck_goals_current_amount_range"),
        CheckConstraint(f"color GLOB '{HEX_COLOR_GLOB}'", name="ck_goals_color_format"),
        CheckConstraint("length(notes) <= 1000", name="ck_goals_notes_length"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    target_amount = Column(Float, nullable=False)
    # How much is saved so far
    current_amount = Column(Float, nullable=False, default=0.0, server_default="0")
    deadline = Column(Date, nullable=False)
    color = Column(String(7), nullable=False)
    # Added by schema version 2
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp())

    def __repr__(self):
        return f"<Goal name={self.name} target={self.target_amount} deadline={self.deadline}>"
