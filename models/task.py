from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index
from models.base import Base, TimestampMixin, new_id, utcnow

class Task(Base, TimestampMixin):
    __tablename__ = "tasks"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    assignee_id = Column(String(64), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(16), nullable=False, default="todo")
    priority = Column(String(16), nullable=False, default="medium")
    due_date = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def apply_changes(self, changes: dict) -> None:
        """Merge ``changes`` and keep completed_at set exactly while status is done."""
        previous = self.status
        for k, v in changes.items():
            if k in ("id", "created_at", "completed_at"):
                continue
            setattr(self, k, v)
        if self.status == "done" and (previous != "done" or self.completed_at is None):
            self.completed_at = utcnow()
        elif self.status != "done":
            self.completed_at = None
        self.updated_at = utcnow()

Index("idx_tasks_project_id", Task.project_id)
Index("idx_tasks_assignee_id", Task.assignee_id)
