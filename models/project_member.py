from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from models.base import Base, new_id, utcnow

class ProjectMember(Base):
    __tablename__ = "project_members"

    id = Column(String(64), primary_key=True, default=new_id)
    project_id = Column(String(64), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(16), nullable=False, default="member")
    joined_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

Index("idx_project_members_project_id", ProjectMember.project_id)
Index("idx_project_members_user_id", ProjectMember.user_id)
