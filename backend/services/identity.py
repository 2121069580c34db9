"""
Reconciles principals authenticated by the external identity provider
with local ``User`` rows.

Matching is by email first, then by the provider's subject id (covers an
email change on the provider side). New users get a locally generated id.
Repeated syncs of an unchanged principal do not write anything.
"""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from models.users import User
from schemas.user import AuthPrincipal
from services.results import ServiceResult, storage_guarded

logger = logging.getLogger(__name__)


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return (db.query(User)
            .options(joinedload(User.company))
            .filter(User.email == email)
            .first())


def _external_id_taken(db: Session, external_id: str) -> bool:
    return db.query(User.id).filter(User.external_id == external_id).first() is not None


def _apply(user: User, **values) -> bool:
    changed = False
    for key, value in values.items():
        if getattr(user, key) != value:
            setattr(user, key, value)
            changed = True
    return changed


@storage_guarded("sync_user", "Failed to load user")
def sync_user(db: Session, principal: AuthPrincipal) -> ServiceResult[User]:
    email = _normalize_email(principal.email)

    user = _find_by_email(db, email)
    if user is not None:
        external_id = user.external_id
        if external_id is None and not _external_id_taken(db, principal.id):
            external_id = principal.id
        # Keep what we have when the provider sends nothing
        changed = _apply(
            user,
            name=principal.name or user.name,
            avatar_url=principal.avatar_url or user.avatar_url,
            external_id=external_id,
        )
        if changed:
            db.commit()
            db.refresh(user)
            logger.info("Refreshed user %s from identity provider", user.id)
        return ServiceResult.success(user)

    user = db.query(User).filter(User.external_id == principal.id).first()
    if user is not None:
        _apply(
            user,
            email=email,
            name=principal.name or user.name,
            avatar_url=principal.avatar_url or user.avatar_url,
        )
        db.commit()
        db.refresh(user)
        logger.info("User %s matched by provider id, email updated", user.id)
        return ServiceResult.success(user)

    user = User(
        email=email,
        name=principal.name,
        avatar_url=principal.avatar_url,
        external_id=principal.id,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another request created the same user in the meantime
        db.rollback()
        existing = _find_by_email(db, email)
        if existing is None:
            raise
        return ServiceResult.success(existing)

    db.refresh(user)
    logger.info("Created user %s for %s", user.id, email)
    return ServiceResult.success(user)


@storage_guarded("get_user_by_email", "Failed to load user")
def get_user_by_email(db: Session, email: str) -> ServiceResult[Optional[User]]:
    """Read-only lookup, no sync."""
    return ServiceResult.success(_find_by_email(db, _normalize_email(email)))
