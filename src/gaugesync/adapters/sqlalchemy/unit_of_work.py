"""Engine lifecycle and units of work for the gauge tables.

``staking_gauge`` belongs to the pool sync and has to exist (and be filled)
before gauges can be linked to it. ``voting_gauge`` is owned here and created on
first start.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Generic, TypeVar

from sqlalchemy import create_engine, inspect
from sqlalchemy.orm import Session, sessionmaker

from gaugesync.adapters.sqlalchemy.mappings import staking_gauge_table, voting_gauge_table
from gaugesync.adapters.sqlalchemy.repositories import (
    SqlAlchemyStakingGaugeRepository,
    SqlAlchemyVotingGaugeRepository,
)
from gaugesync.config.storage import get_database_config
from gaugesync.domain.ports.unit_of_work import GaugeRepositories, RepositoryCollection

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the database is not configured or not ready for a sync."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            sessionmaker(bind=engine, expire_on_commit=False) if engine is not None else None
        )

    def require_sessions(self) -> sessionmaker[Session]:
        if self.sessions is None:
            raise StartupError("No database configured; call startup() first")
        return self.sessions


_STATE = _AdapterState()


def prepare_schema(engine: Engine) -> None:
    """Check for the staking table and create the voting gauge table if needed."""

    if not inspect(engine).has_table(staking_gauge_table.name):
        raise StartupError(
            f"Table {staking_gauge_table.name!r} does not exist; "
            "staking gauges must be synced before voting gauges"
        )
    voting_gauge_table.create(engine, checkfirst=True)


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine``, or to a new engine for the configured database."""

    if _STATE.engine is not None and not force:
        raise StartupError("Database already configured; pass force=True to rebind")

    resolved = engine or create_engine(database_uri or get_database_config().uri)
    prepare_schema(resolved)
    log.debug("Using database %s", resolved.url.render_as_string(hide_password=True))
    _STATE.bind(resolved)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine, if any, and forget it."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.bind(None)


TRepositories = TypeVar("TRepositories", bound=RepositoryCollection)


class BaseSqlAlchemyUnitOfWork(ABC, Generic[TRepositories]):
    """One session per ``with`` block.

    Closing the session discards whatever was not committed, so leaving the block
    early or with an exception never writes half a unit.
    """

    def __init__(self) -> None:
        self._sessions = _STATE.require_sessions()
        self._session: Session | None = None
        self._repositories: TRepositories | None = None

    @abstractmethod
    def _build_repositories(self, session: Session) -> TRepositories: ...

    def __enter__(self) -> BaseSqlAlchemyUnitOfWork[TRepositories]:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        self._session = self._sessions()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        session = self._open_session()
        self._session = None
        self._repositories = None
        session.close()
        return False

    def commit(self) -> None:
        self._open_session().commit()

    def rollback(self) -> None:
        self._open_session().rollback()

    @property
    def repositories(self) -> TRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def _open_session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session


class SqlAlchemyGaugeUnitOfWork(BaseSqlAlchemyUnitOfWork[GaugeRepositories]):
    def _build_repositories(self, session: Session) -> GaugeRepositories:
        return GaugeRepositories(
            staking_gauges=SqlAlchemyStakingGaugeRepository(session),
            voting_gauges=SqlAlchemyVotingGaugeRepository(session),
        )


if TYPE_CHECKING:
    from gaugesync.domain.ports.unit_of_work import GaugeUnitOfWork

    _uow_check: GaugeUnitOfWork = SqlAlchemyGaugeUnitOfWork()
