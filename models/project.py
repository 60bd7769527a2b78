from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index
from models.base import Base, TimestampMixin, new_id

class Project(Base, TimestampMixin):
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    manager_id = Column(String(64), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    deadline = Column(DateTime(timezone=True), nullable=True)
    priority = Column(String(16), nullable=False, default="medium")
    status = Column(String(16), nullable=False, default="active")
    # Stored as-is; not derived from task completion.
    progress = Column(Integer, nullable=False, default=0)
    tags = Column(String(512), nullable=True)
    image_url = Column(String(512), nullable=True)
    test_user_assigned = Column(Boolean, nullable=False, default=False)

Index("idx_projects_manager_id", Project.manager_id)
