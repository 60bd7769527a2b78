from sqlalchemy.orm import Session
from models.account import Account, CREDENTIAL_PROVIDER


def get_credential_account(db: Session, user_id: str):
    return (
        db.query(Account)
        .filter(Account.user_id == user_id, Account.provider_id == CREDENTIAL_PROVIDER)
        .first()
    )


def set_password(db: Session, user_id: str, hashed_password: str):
    acc = get_credential_account(db, user_id)
    if not acc:
        acc = Account(user_id=user_id, provider_id=CREDENTIAL_PROVIDER)
        db.add(acc)
    acc.password = hashed_password
    db.commit()
    db.refresh(acc)
    return acc


def get_password(db: Session, user_id: str) -> str | None:
    acc = get_credential_account(db, user_id)
    return acc.password if acc else None
