from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool

from realty.db import Base, get_db, init_db, make_engine, make_sessionmaker
from realty.main import create_app
from realty.models import Property, Unit, WorkingArea
from realty.services.lifecycle import LifecycleManager, MillisClock
from realty.store import EntityStore

from helpers import area_fields, property_fields, unit_fields


@pytest.fixture
def engine():
    eng = make_engine("sqlite://", poolclass=StaticPool)
    init_db(eng)
    yield eng
    Base.metadata.drop_all(eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_sessionmaker(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def store(db):
    return EntityStore(db)


@pytest.fixture
def lm(store):
    return LifecycleManager(store, clock=MillisClock())


@pytest.fixture
def client(session_factory):
    app = create_app(create_schema=False)

    def _db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _db
    with TestClient(app) as c:
        yield c


@pytest.fixture
def catalog(lm):
    """Zone1 -> P1 -> one unit."""
    area = lm.create(WorkingArea, area_fields())
    prop = lm.create(Property, property_fields(area.id))
    unit = lm.create(Unit, unit_fields(prop.id))
    return area, prop, unit
