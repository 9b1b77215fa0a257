"""Shared fixtures: throwaway SQLite databases and a small set of master data."""

import pytest
from sqlalchemy.orm import sessionmaker, scoped_session

from src.models.base import Base
from src.services import database as db_module
from src.services.database import create_database_engine


def _memory_engine():
    engine = create_database_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="function")
def test_db(monkeypatch):
    """In-memory database behind the service layer's session_scope().

    Yields a scoped session factory bound to the same database, so tests can
    seed rows and inspect what the services wrote.
    """
    engine = _memory_engine()
    Session = scoped_session(sessionmaker(bind=engine, expire_on_commit=False))
    monkeypatch.setattr(db_module, "get_session_factory", lambda: Session)

    yield Session

    Session.remove()
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def make_db():
    """Factory for additional, independent in-memory databases.

    Each call returns a new sessionmaker bound to its own empty database.
    Used where a test needs a source and a destination database, e.g. to
    export from one and import into the other.
    """
    engines = []

    def _make():
        engine = _memory_engine()
        engines.append(engine)
        return sessionmaker(bind=engine, expire_on_commit=False)

    yield _make

    for engine in engines:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture(scope="function")
def package_dir(tmp_path):
    """Empty directory for a migration package."""
    path = tmp_path / "package"
    path.mkdir()
    return path


@pytest.fixture(scope="function")
def sample_masters(test_db):
    """Provide a small set of master data.

    Creates:
    - Agent AG01, price list L01, warehouse MAG01 (main)
    - Supplier F001, article ART01 (default supplier F001)
    - Client C001 (agent AG01, price list L01)
    """
    from decimal import Decimal

    from src.models import Agent, Article, Client, PriceList, Supplier, Warehouse

    session = test_db()

    agent = Agent(code="AG01", first_name="Mario", last_name="Rossi")
    price_list = PriceList(code="L01", description="Listino base")
    warehouse = Warehouse(code="MAG01", description="Sede", is_main=True)
    supplier = Supplier(code="F001", company_name="Forniture Srl", city="Milano")
    session.add_all([agent, price_list, warehouse, supplier])
    session.flush()

    article = Article(
        code="ART01",
        description="Vite 4x20",
        sale_price=Decimal("0.15"),
        default_supplier_id=supplier.id,
    )
    client = Client(
        code="C001",
        company_name="Cliente Spa",
        city="Torino",
        agent_id=agent.id,
        price_list_id=price_list.id,
    )
    session.add_all([article, client])
    session.commit()

    class MasterData:
        def __init__(self):
            self.agent = agent
            self.price_list = price_list
            self.warehouse = warehouse
            self.supplier = supplier
            self.article = article
            self.client = client

    return MasterData()
