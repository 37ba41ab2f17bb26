from __future__ import annotations

import sqlite3
from decimal import Decimal
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, select, update
from sqlalchemy.exc import IntegrityError

from wellbook.adapters.sqlalchemy.repositories import SqlAlchemyWellRepository
from wellbook.adapters.sqlalchemy.tables import afe_table, well_table
from wellbook.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyUnitOfWork,
    StartupError,
    build_registry,
    configured_engine,
    shutdown,
    startup,
)
from wellbook.domain.model import EntityKind, WellStatus
from wellbook.domain.unit_of_work import ConcurrentModificationError, InvalidStateError
from tests.helpers.operations import make_afe, make_well

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path
    from uuid import UUID

    from sqlalchemy.engine import Engine
    from sqlalchemy.sql.schema import Table

    from wellbook.domain.model import VersionedEntity, Well

type UnitOfWorkFactory = Callable[[], SqlAlchemyUnitOfWork]


@pytest.fixture(autouse=True)
def reset_unit_of_work_state() -> Iterator[None]:
    shutdown()
    yield
    shutdown()


def _persist(factory: UnitOfWorkFactory, *entities: VersionedEntity) -> None:
    with factory() as uow:
        for entity in entities:
            uow.register_new(entity)
        uow.commit()


def _stored_version(engine: Engine, table: Table, entity_id: UUID) -> int | None:
    with engine.connect() as connection:
        return connection.execute(
            select(table.c.version).where(table.c.id == entity_id)
        ).scalar_one_or_none()


def _bump_version_elsewhere(engine: Engine, table: Table, entity_id: UUID, version: int) -> None:
    with engine.begin() as connection:
        connection.execute(update(table).where(table.c.id == entity_id).values(version=version))


def test_sqlalchemy_unit_of_work_requires_startup() -> None:
    with pytest.raises(StartupError):
        SqlAlchemyUnitOfWork()


def test_startup_requires_force_for_reconfiguration(tmp_path: Path) -> None:
    engine_a = create_engine(f"sqlite+pysqlite:///{tmp_path / 'a.db'}", future=True)
    engine_b = create_engine(f"sqlite+pysqlite:///{tmp_path / 'b.db'}", future=True)

    startup(engine=engine_a, force=True)

    with pytest.raises(StartupError):
        startup(engine=engine_b)

    startup(engine=engine_b, force=True)
    assert configured_engine() is engine_b


def test_end_to_end_commit(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    updated = make_well("Order 2", version=5)
    removed = make_well("Order 3")
    _persist(sqlite_unit_of_work, updated, removed)
    created = make_well("Order 1", version=0)

    with sqlite_unit_of_work() as uow:
        uow.register_new(created)
        updated.change_status(WellStatus.COMPLETED)
        uow.register_dirty(updated)
        uow.register_deleted(removed)
        uow.commit()
        assert uow.tracker.is_empty
        assert not uow.is_active()

    assert _stored_version(sqlite_engine, well_table, created.id) == 0
    assert _stored_version(sqlite_engine, well_table, updated.id) == 6
    assert _stored_version(sqlite_engine, well_table, removed.id) is None
    with sqlite_unit_of_work() as uow:
        reloaded = uow.repositories.wells.find_by_id(updated.id)
    assert reloaded is not None
    assert reloaded.status is WellStatus.COMPLETED


def test_stale_update_rolls_back_every_change(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    wells = [make_well(f"Well {index}", version=1) for index in range(5)]
    _persist(sqlite_unit_of_work, *wells)
    _bump_version_elsewhere(sqlite_engine, well_table, wells[2].id, 2)
    created = make_well("Created")

    uow = sqlite_unit_of_work()
    uow.begin()
    uow.register_new(created)
    for well in wells:
        well.rename(f"{well.name} edited")
        uow.register_dirty(well)
    with pytest.raises(ConcurrentModificationError) as exc:
        uow.commit()

    assert (exc.value.expected, exc.value.found) == (1, 2)
    assert _stored_version(sqlite_engine, well_table, created.id) is None
    with sqlite_engine.connect() as connection:
        rows = connection.execute(
            select(well_table.c.id, well_table.c.name, well_table.c.version)
        ).all()
    by_id = {row.id: row for row in rows}
    for index, well in enumerate(wells):
        assert by_id[well.id].version == (2 if index == 2 else 1)
        assert not by_id[well.id].name.endswith("edited")
        assert well.version == 1
    assert uow.tracker.is_empty
    assert not uow.is_active()


def test_inserts_are_applied_before_updates(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    original_well = make_well("Original")
    afe = make_afe(original_well, cost=Decimal("500000.00"))
    _persist(sqlite_unit_of_work, original_well, afe)
    replacement = make_well("Replacement")

    with sqlite_unit_of_work() as uow:
        # the update below references a row that only exists once the insert has run
        afe.well_id = replacement.id
        uow.register_dirty(afe)
        uow.register_new(replacement)
        uow.commit()

    with sqlite_engine.connect() as connection:
        stored_well_id = connection.execute(
            select(afe_table.c.well_id).where(afe_table.c.id == afe.id)
        ).scalar_one()
    assert stored_well_id == replacement.id


def test_foreign_keys_are_enforced(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    orphan = make_afe(make_well("Never saved"))

    with sqlite_unit_of_work() as uow:
        uow.register_new(orphan)
        with pytest.raises(IntegrityError):
            uow.commit()
        assert not uow.is_active()


def test_concurrent_writer_is_detected(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    well = make_well(version=3)
    _persist(sqlite_unit_of_work, well)
    _bump_version_elsewhere(sqlite_engine, well_table, well.id, 4)

    with sqlite_unit_of_work() as uow:
        well.rename("Lost update")
        uow.register_dirty(well)
        with pytest.raises(ConcurrentModificationError) as exc:
            uow.commit()

    assert exc.value.expected == 3
    assert exc.value.found == 4
    assert well.version == 3
    assert _stored_version(sqlite_engine, well_table, well.id) == 4


def test_row_deleted_by_someone_else_conflicts(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    well = make_well(version=2)
    _persist(sqlite_unit_of_work, well)
    with sqlite_engine.begin() as connection:
        connection.execute(well_table.delete().where(well_table.c.id == well.id))

    with sqlite_unit_of_work() as uow:
        uow.register_dirty(well)
        with pytest.raises(ConcurrentModificationError) as exc:
            uow.commit()

    assert exc.value.found == 0


def test_commit_after_commit_is_invalid(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    with sqlite_unit_of_work() as uow:
        uow.register_new(make_well())
        uow.commit()
        with pytest.raises(InvalidStateError):
            uow.commit()


def test_repositories_read_outside_commit(sqlite_unit_of_work: UnitOfWorkFactory) -> None:
    well = make_well()
    _persist(sqlite_unit_of_work, well, make_afe(well))

    with sqlite_unit_of_work() as uow:
        repositories = uow.repositories
        listed = repositories.wells.list_by_operator(well.organization_id)
        afes = repositories.afes.list_for_well(well.id)

    assert [item.id for item in listed] == [well.id]
    assert len(afes) == 1


def _interleaving_well_repository(
    database: str, outcomes: list[str]
) -> type[SqlAlchemyWellRepository]:
    class InterleavingWellRepository(SqlAlchemyWellRepository):
        """Lets another connection try to write right after the version is read."""

        def find_by_id(self, entity_id: UUID) -> Well | None:
            found = super().find_by_id(entity_id)
            other = sqlite3.connect(database, timeout=0)
            try:
                other.execute(
                    "UPDATE well SET version = 7 WHERE id = ?", (entity_id.hex,)
                )
                other.commit()
                outcomes.append("committed")
            except sqlite3.OperationalError:
                other.rollback()
                outcomes.append("blocked")
            finally:
                other.close()
            return found

    return InterleavingWellRepository


def test_version_read_holds_until_commit(
    sqlite_engine: Engine, sqlite_unit_of_work: UnitOfWorkFactory
) -> None:
    well = make_well(version=1)
    _persist(sqlite_unit_of_work, well)
    outcomes: list[str] = []
    registry = build_registry()
    database = sqlite_engine.url.database
    assert database is not None
    registry.register_repository(
        EntityKind.WELL, _interleaving_well_repository(database, outcomes)
    )

    with SqlAlchemyUnitOfWork(registry=registry) as uow:
        well.rename("Checked then saved")
        uow.register_dirty(well)
        uow.commit()

    assert outcomes == ["blocked"]
    assert _stored_version(sqlite_engine, well_table, well.id) == 2


def test_read_session_is_released_by_commit_and_rollback(
    sqlite_unit_of_work: UnitOfWorkFactory,
) -> None:
    well = make_well()
    _persist(sqlite_unit_of_work, well)
    uow = sqlite_unit_of_work()

    uow.begin()
    assert uow.repositories.wells.find_by_id(well.id) is not None
    assert uow.has_open_read_session
    well.rename("Renamed after read")
    uow.register_dirty(well)
    uow.commit()
    assert not uow.has_open_read_session

    uow.begin()
    uow.repositories.wells.list_by_operator(well.organization_id)
    uow.rollback()
    assert not uow.has_open_read_session

    uow.get_repository(EntityKind.WELL).find_by_id(well.id)
    uow.close()
    assert not uow.has_open_read_session
