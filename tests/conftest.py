import os
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from gradeboard.core.deps import get_db
from gradeboard.core.security import create_access_token, hash_password
from gradeboard.db.base import Base
from gradeboard.main import app
from gradeboard.models.group import FinalGroup, GroupMember
from gradeboard.models.task import Task, TaskAssignee
from gradeboard.models.user import User

TEST_DB_FILE = "test_gradeboard.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

PASSWORD = "password123"
# bcrypt is slow on purpose; hash once for every seeded user
PASSWORD_HASH = hash_password(PASSWORD)

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


def _user(email: str, full_name: str, role: str) -> User:
    return User(
        email=email,
        full_name=full_name,
        role=role,
        hashed_password=PASSWORD_HASH,
    )


@pytest.fixture(autouse=True)
def seed():
    """Seed a clean minimal dataset for each test.

    Group "Team Rocket" has student1 (owner) and student2; student3 is in no
    group. Task A (assigned to both members) and task B (student1 only) are
    done and ready for grading.
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        for table in reversed(Base.metadata.sorted_tables):
            db.execute(table.delete())
        db.commit()

        student = _user("student1@example.com", "Student One", "student")
        student2 = _user("student2@example.com", "Student Two", "student")
        outsider = _user("student3@example.com", None, "student")
        lecturer = _user("lecturer1@example.com", "Lecturer One", "lecturer")
        admin = _user("admin1@example.com", "Admin One", "admin")
        db.add_all([student, student2, outsider, lecturer, admin])
        db.commit()

        group = FinalGroup(name="Team Rocket", description="Final project team")
        other_group = FinalGroup(name="Team Aqua")
        db.add_all([group, other_group])
        db.commit()

        db.add_all(
            [
                GroupMember(group_id=group.id, user_id=student.id, role="owner"),
                GroupMember(group_id=group.id, user_id=student2.id, role="member"),
            ]
        )

        task_a = Task(group_id=group.id, title="Task A", status="done", created_by_id=student.id)
        task_b = Task(group_id=group.id, title="Task B", status="done", created_by_id=student.id)
        db.add_all([task_a, task_b])
        db.commit()

        db.add_all(
            [
                TaskAssignee(task_id=task_a.id, user_id=student.id),
                TaskAssignee(task_id=task_a.id, user_id=student2.id),
                TaskAssignee(task_id=task_b.id, user_id=student.id),
            ]
        )
        db.commit()

        yield SimpleNamespace(
            student_id=student.id,
            student2_id=student2.id,
            outsider_id=outsider.id,
            lecturer_id=lecturer.id,
            admin_id=admin.id,
            group_id=group.id,
            other_group_id=other_group.id,
            task_a_id=task_a.id,
            task_b_id=task_b.id,
        )
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_header():
    """Build an Authorization header for a seeded user id."""

    def _header(user_id: int) -> dict:
        token = create_access_token(data={"sub": str(user_id)})
        return {"Authorization": f"Bearer {token}"}

    return _header
