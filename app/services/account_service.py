"""Account provisioning and credential checks."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.security import get_password_hash, verify_password
from app.models import User
from app.utils.enums import RoleType

logger = logging.getLogger(__name__)

FALLBACK_ADMIN_USER: str = "admin"
FALLBACK_ADMIN_PASS: str = "123"


def ensure_default_admin(db: Session) -> bool:
    """Ensure the bootstrap super admin exists and is active.

    Returns:
        bool: True when the account existed before this call.
    """
    username = settings.admin_user or FALLBACK_ADMIN_USER
    existing_admin = db.scalar(select(User).where(User.username == username).limit(1))
    if existing_admin is not None:
        updates_applied = False
        if not existing_admin.is_active:
            existing_admin.is_active = True
            updates_applied = True
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        if existing_admin.role != RoleType.SUPER_ADMIN:
            logger.warning(
                "[BOOTSTRAP] Bootstrap admin had role %s; restoring SUPER_ADMIN.",
                existing_admin.role,
            )
            existing_admin.role = RoleType.SUPER_ADMIN
            updates_applied = True

        if updates_applied:
            db.commit()
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    password = settings.admin_pass or FALLBACK_ADMIN_PASS
    admin = User(
        username=username,
        password_hash=get_password_hash(password),
        role=RoleType.SUPER_ADMIN,
        email=None,
        is_active=True,
    )
    db.add(admin)
    db.commit()
    if not settings.admin_pass:
        logger.warning(
            "[SECURITY] Default admin account created: %s/%s. Change default password immediately.",
            username,
            FALLBACK_ADMIN_PASS,
        )
    return False


def authenticate_user(db: Session, login: str, password: str) -> User | None:
    """Return the active user for username or email and password, else None."""
    login = login.strip()
    user = db.scalar(select(User).where((User.username == login) | (User.email == login)).limit(1))
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    return user
