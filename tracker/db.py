"""
Relational storage backend on SQLAlchemy (Postgres in production, SQLite
for local runs and tests).
"""

from __future__ import annotations

import json
import logging
from typing import Optional

from sqlalchemy import (
    BigInteger,
    Column,
    Integer,
    String,
    Text,
    create_engine,
    delete,
    select,
    text,
)
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from tracker.errors import StorageFailure

logger = logging.getLogger(__name__)

Base = declarative_base()


class TaskRow(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    points = Column(BigInteger, nullable=False, default=0)

    def as_dict(self) -> dict:
        return {"name": self.name, "points": self.points}


class RewardRow(Base):
    __tablename__ = "rewards"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_email = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False, default="")
    points = Column(BigInteger, nullable=False, default=0)
    quantity = Column(BigInteger, nullable=False, default=0)

    def as_dict(self) -> dict:
        return {"name": self.name, "points": self.points, "quantity": self.quantity}


class StateRow(Base):
    __tablename__ = "states"

    user_email = Column(String, primary_key=True)
    saldo_anterior = Column("saldoAnterior", BigInteger, nullable=False, default=0)
    # JSON-encoded mapping of task id -> checked flag.
    task_checks = Column("taskChecks", Text, nullable=False, default="{}")

    def as_dict(self) -> dict:
        try:
            task_checks = json.loads(self.task_checks or "{}")
        except ValueError:
            logger.warning(
                "Unreadable taskChecks for %r; treating as empty", self.user_email
            )
            task_checks = {}
        if not isinstance(task_checks, dict):
            task_checks = {}
        return {"saldoAnterior": self.saldo_anterior, "taskChecks": task_checks}


_COLLECTION_ROWS = {
    "tasks": TaskRow,
    "rewards": RewardRow,
}

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _lock_partition(session: Session, kind: str, key: str) -> None:
    """
    Serialize writers of one partition for the rest of the transaction.
    SQLite already holds a database-wide write lock once the DELETE runs.
    """
    if session.get_bind().dialect.name == "postgresql":
        session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))"),
            {"lock_key": f"{kind}:{key}"},
        )


class SqlStorageBackend:
    """
    One shared table per entity type partitioned by ``user_email``.
    Accepts any SQLAlchemy URL.
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlStorageBackend")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def load_collection(self, kind: str, key: str) -> list[dict]:
        row_cls = _COLLECTION_ROWS[kind]
        try:
            with self.Session() as session:
                rows = session.execute(
                    select(row_cls)
                    .where(row_cls.user_email == key)
                    .order_by(row_cls.id.asc())
                ).scalars()
                return [row.as_dict() for row in rows]
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to load {kind} for {key!r}") from exc

    def replace_collection(self, kind: str, key: str, records: list[dict]) -> None:
        row_cls = _COLLECTION_ROWS[kind]
        try:
            with self.Session.begin() as session:
                _lock_partition(session, kind, key)
                session.execute(delete(row_cls).where(row_cls.user_email == key))
                session.add_all(row_cls(user_email=key, **record) for record in records)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to replace {kind} for {key!r}") from exc

    def load_state(self, key: str) -> Optional[dict]:
        try:
            with self.Session() as session:
                row = session.get(StateRow, key)
                return row.as_dict() if row else None
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to load state for {key!r}") from exc

    def upsert_state(self, key: str, state: dict) -> None:
        saldo_anterior = state.get("saldoAnterior", 0)
        task_checks = json.dumps(state.get("taskChecks", {}), sort_keys=True)
        insert = _UPSERT_DIALECTS.get(self.engine.dialect.name)
        try:
            with self.Session.begin() as session:
                if insert is None:
                    session.merge(
                        StateRow(
                            user_email=key,
                            saldo_anterior=saldo_anterior,
                            task_checks=task_checks,
                        )
                    )
                    return
                stmt = insert(StateRow.__table__).values(
                    user_email=key, saldoAnterior=saldo_anterior, taskChecks=task_checks
                )
                stmt = stmt.on_conflict_do_update(
                    index_elements=["user_email"],
                    set_={
                        "saldoAnterior": stmt.excluded.saldoAnterior,
                        "taskChecks": stmt.excluded.taskChecks,
                    },
                )
                session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to upsert state for {key!r}") from exc
