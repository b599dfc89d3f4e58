"""
Test Configuration and Fixtures
Shared testing infrastructure for the materials exchange
"""
import os

# Must be set before the package reads its settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_TO_FILE"] = "false"
os.environ["SECRET_KEY"] = "test-secret-key"

import itertools
from typing import Any, Callable, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from materials_exchange.core.database import Base, get_db
from materials_exchange.core.security import create_access_token
from materials_exchange.main import app
from materials_exchange.models.inventory import InventoryRecord
from materials_exchange.services.catalog import CatalogRow, Viewer
from materials_exchange.services.ingestion import replace_guard

# Test database URL - in-memory SQLite shared through one connection
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test"""
    # Create all tables
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client with database dependency override"""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_replace_guard():
    """No replace left marked as running between tests"""
    yield
    replace_guard._locks.clear()


# Viewers and tokens

@pytest.fixture
def viewer() -> Viewer:
    """Balance unit 2000 with one Moscow warehouse"""
    return Viewer(tenant_key="2000", warehouses=("Москва, Южный порт",))


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    """Bearer token for the 2000 viewer"""
    token = create_access_token(
        tenant_key="2000",
        warehouses=[{"address": "Москва, Южный порт"}],
        subject="user-2000",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    """Bearer token for an administrator of balance unit 9000"""
    token = create_access_token(tenant_key="9000", subject="admin", is_admin=True)
    return {"Authorization": f"Bearer {token}"}


# Records

SAMPLE_RECORDS: List[Dict[str, Any]] = [
    {
        "tenant_key": "2000", "company_name": "ООО Север", "receipt_date": "2023-01-15",
        "warehouse_address": "Москва, Южный порт, склад 3", "material_class": 101,
        "class_name": "Трубы", "material_subclass": "10101", "subclass_name": "Трубы стальные",
        "material_code": 500001, "material_name": "Труба 57x3,5", "unit": "м",
        "quantity": "1 200", "cost": "350 000,00",
    },
    {
        "tenant_key": "2000", "company_name": "ООО Север", "receipt_date": "2023-03-02",
        "warehouse_address": "Пермь, Индустриальный", "material_class": 205,
        "class_name": "Кабель", "material_subclass": "20501", "subclass_name": "Кабель силовой",
        "material_code": 500002, "material_name": "Кабель ВВГ 3x2,5", "unit": "м",
        "quantity": "800", "cost": "96 000,00",
    },
    {
        "tenant_key": "3000", "company_name": "АО Восток", "receipt_date": "2022-11-20",
        "warehouse_address": "Москва, Южный порт, склад 7", "material_class": 101,
        "class_name": "Трубы", "material_subclass": "10102", "subclass_name": "Трубы полиэтиленовые",
        "material_code": 600001, "material_name": "Труба ПЭ 110", "unit": "м",
        "quantity": "45", "cost": "12 500,50",
    },
    {
        "tenant_key": "3000", "company_name": "АО Восток", "receipt_date": "2023-05-11",
        "warehouse_address": "Казань, Приволжский", "material_class": 205,
        "class_name": "Кабель", "material_subclass": "20502", "subclass_name": "Кабель контрольный",
        "material_code": 600002, "material_name": "Кабель КВВГ 7x1,5", "unit": "м",
        "quantity": "2 000", "cost": "180 000,00",
    },
    {
        "tenant_key": "4000", "company_name": "ПАО Юг", "receipt_date": "2023-02-28",
        "warehouse_address": "Краснодар, Западный", "material_class": 310,
        "class_name": "Арматура", "material_subclass": "31001", "subclass_name": "Задвижки",
        "material_code": 700001, "material_name": "Задвижка 30с41нж", "unit": "шт",
        "quantity": "12", "cost": "240 000,00",
    },
    {
        "tenant_key": "4000", "company_name": "ПАО Юг", "receipt_date": "2023-04-03",
        "warehouse_address": "", "material_class": 205,
        "class_name": "Кабель", "material_subclass": "20501", "subclass_name": "Кабель силовой",
        "material_code": 700002, "material_name": "Кабель АВВГ 4x16", "unit": "м",
        "quantity": "300,5", "cost": "60 100,00",
    },
]


@pytest.fixture
def sample_records(db_session: Session) -> List[InventoryRecord]:
    """Six records across balance units 2000, 3000 and 4000"""
    records = [InventoryRecord(**values) for values in SAMPLE_RECORDS]
    db_session.add_all(records)
    db_session.commit()
    for record in records:
        db_session.refresh(record)
    return records


@pytest.fixture
def make_row() -> Callable[..., CatalogRow]:
    """Factory for catalog rows with sequential ids"""
    ids = itertools.count(1)

    def _make_row(**values) -> CatalogRow:
        values.setdefault("id", next(ids))
        return CatalogRow(**values)

    return _make_row


@pytest.fixture
def catalog_rows(make_row) -> List[CatalogRow]:
    """Sample records as catalog rows, no database needed"""
    rows = []
    for values in SAMPLE_RECORDS:
        rows.append(make_row(**{k: "" if v is None else str(v) for k, v in values.items()}))
    return rows
