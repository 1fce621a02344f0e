# liftlog/repositories/base.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Generic, TypeVar

from sqlalchemy.orm import Session
from sqlalchemy import select, func

T = TypeVar("T")  # SQLAlchemy model type


class Unauthenticated(PermissionError):
    """A repository call was made without a caller identity."""


def require_user(user_id: str | None) -> str:
    # missing identity is an auth failure, never an empty result or a 404
    if not user_id:
        raise Unauthenticated("caller identity required")
    return user_id


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    total: int
    limit: int
    offset: int

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style."""
    model: type

    def __init__(self, db: Session):
        self.db = db

    def page_from_stmt(self, stmt, *, limit: int = 50, offset: int = 0) -> Page[T]:
        # one query for items and one for the count over the same filters
        total = self.db.execute(
            select(func.count()).select_from(stmt.order_by(None).subquery())
        ).scalar_one()
        items = list(self.db.execute(stmt.limit(limit).offset(offset)).scalars().all())
        return Page(items=items, total=total, limit=limit, offset=offset)

    def add_and_commit(self, entity: T) -> T:
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def commit_and_refresh(self, entity: T) -> T:
        self.db.commit()
        self.db.refresh(entity)
        return entity
