import os
from types import SimpleNamespace

import pytest

# Force the SQLite file before anything imports navconsole.db
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-0123456789abcdef0123456789abcdef"
os.environ["ARGON2_MEMORY_COST"] = "1024"
os.environ["ARGON2_TIME_COST"] = "1"
os.environ["ARGON2_PARALLELISM"] = "1"

from fastapi.testclient import TestClient  # noqa: E402

from navconsole.db import SessionLocal  # noqa: E402
from navconsole.db.init_db import drop_db, init_db  # noqa: E402
from navconsole.dependencies.authz import get_current_user  # noqa: E402
from navconsole.main import app  # noqa: E402
from navconsole.models.menu import MenuNode, MenuType  # noqa: E402
from navconsole.models.role import Role  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    drop_db()
    init_db()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def fake_user(permissions=(), *, is_system_admin=False, role_active=True, username="tester"):
    """User-like object for dependency overrides; only the attributes the access checks read."""
    role = SimpleNamespace(name="test-role", is_active=role_active, permissions=list(permissions))
    return SimpleNamespace(username=username, email=None, is_system_admin=is_system_admin, role=role)


@pytest.fixture
def as_user():
    """Authenticate requests as a user holding the given grant strings."""

    def _login(permissions=(), **kwargs):
        user = fake_user(permissions, **kwargs)
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login


@pytest.fixture
def as_admin(as_user):
    return as_user(is_system_admin=True, username="admin")


@pytest.fixture
def seed_menus(db):
    """Insert menu rows and return their ids keyed by name.

    Each row is ``(name, menu_type, parent_name, sort_order)`` with an optional
    fifth ``is_active`` flag.
    """

    def _seed(*rows):
        ids: dict[str, int] = {}
        for row in rows:
            name, menu_type, parent, sort_order, *rest = row
            menu = MenuNode(
                name=name,
                label=name.replace("-", " ").title(),
                menu_type=MenuType(menu_type),
                parent_id=ids[parent] if parent else None,
                sort_order=sort_order,
                is_active=rest[0] if rest else True,
            )
            db.add(menu)
            db.flush()
            ids[name] = menu.id
        db.commit()
        return ids

    return _seed


@pytest.fixture
def seed_role(db):
    def _seed(name="operator", permissions=(), is_active=True):
        role = Role(name=name, display_name=name.title(), description="", is_active=is_active, permissions=list(permissions))
        db.add(role)
        db.commit()
        db.refresh(role)
        return role

    return _seed
