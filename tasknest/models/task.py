"""Task model"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship, validates
from tasknest.core.database import Base, utcnow

PRIORITIES = ("Low", "Medium", "High")
STATUSES = ("Pending", "In Progress", "Completed")
STATUS_COMPLETED = "Completed"


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    team_id = Column(Integer, ForeignKey("teams.id"), nullable=True, index=True)
    assigned_to = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    title = Column(String(200), nullable=False)
    description = Column(String(1000), default="")
    category = Column(String(50), default="General", index=True)
    priority = Column(String, default="Medium")
    status = Column(String, default="Pending")
    due_date = Column(DateTime, nullable=True, index=True)
    completed_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    team = relationship("Team")

    @validates("status")
    def _sync_completed_at(self, key, value):
        # completed_at n'existe que pour une tâche "Completed"
        if value == STATUS_COMPLETED:
            if self.completed_at is None:
                self.completed_at = utcnow()
        else:
            self.completed_at = None
        return value

    @property
    def is_overdue(self) -> bool:
        return (
            self.due_date is not None
            and self.status != STATUS_COMPLETED
            and self.due_date < utcnow()
        )
