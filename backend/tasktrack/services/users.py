from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import Conflict, Unauthenticated
from ..logging_setup import redact_email
from ..models.user import User
from ..schemas.user import UserCreate, UserLogin
from ..utils.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def register_user(db: Session, data: UserCreate) -> User:
    email = normalize_email(data.email)
    if get_user_by_email(db, email) is not None:
        raise Conflict("Email already in use")

    user = User(username=data.username, email=email, password=hash_password(data.password))
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same address
        db.rollback()
        raise Conflict("Email already in use")
    db.refresh(user)
    logger.info("Registered user %s (%s)", user.id, redact_email(email))
    return user


def authenticate_user(db: Session, data: UserLogin) -> User:
    """Check email + password; unknown email and wrong password fail identically."""
    user = get_user_by_email(db, data.email)
    if user is None or not verify_password(data.password, user.password):
        logger.info("Failed login for %s", redact_email(data.email))
        raise Unauthenticated(INVALID_CREDENTIALS)
    logger.info("User %s logged in", user.id)
    return user
