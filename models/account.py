from sqlalchemy import Column, String, ForeignKey, Index
from models.base import Base, TimestampMixin, new_id

CREDENTIAL_PROVIDER = "credential"

class Account(Base, TimestampMixin):
    """Local username/password credential; separate from identity-token logins."""
    __tablename__ = "account"

    id = Column(String(64), primary_key=True, default=new_id)
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    provider_id = Column(String(255), nullable=False, default=CREDENTIAL_PROVIDER)
    password = Column(String(255), nullable=True)

Index("idx_account_userId_provider", Account.user_id, Account.provider_id, unique=True)
