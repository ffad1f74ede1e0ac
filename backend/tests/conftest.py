# backend/tests/conftest.py
"""
Pytest configuration with PRODUCTION DATABASE PROTECTION.

Tests run against an in-memory SQLite database (single shared connection,
SAVEPOINT support enabled in app.database). Tables are created and dropped
around every test.
"""

import os

# CRITICAL: Set testing mode BEFORE any app imports!
os.environ["is_testing"] = "true"

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Callable, Iterable, Optional

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.enums import GroupType, RoleName, SessionType
from app.database import Base, SessionLocal, engine
from app.main import app
from app.api.dependencies.database import get_db
from app.models import (
    Center,
    ClassSession,
    GroupStudent,
    SessionStudent,
    StaffCenter,
    Student,
    StudentGroup,
    Tenant,
    TenantMembership,
    User,
)
from app.services.session_generation.types import RecurrenceSpec

settings.is_testing = True

# ============================================================================
# PRODUCTION DATABASE PROTECTION
# ============================================================================

TEST_DATABASE_URL = settings.get_database_url()

if settings.is_production_database(TEST_DATABASE_URL):
    raise RuntimeError(f"CRITICAL: Refusing to run tests against production database {TEST_DATABASE_URL!r}")


@pytest.fixture(scope="function")
def db() -> Session:
    """
    Create a new database session for each test.

    SAFETY: Only runs on validated test databases.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()

    yield session

    session.rollback()
    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session):
    """Create a test client bound to the test session."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    test_client = TestClient(app)

    yield test_client

    app.dependency_overrides.clear()
    test_client.close()


# ============================================================================
# Tenant fixtures
# ============================================================================


@dataclass
class TenantSeed:
    """Ids of the rows created by the `seed` fixture."""

    tenant_id: str
    other_tenant_id: str
    admin_id: str
    tutor_id: str
    second_tutor_id: str
    parent_id: str
    center_id: str
    other_center_id: str
    student_id: str
    second_student_id: str
    group_id: str
    class_id: str
    other_center_group_id: str

    def headers(self, actor_id: Optional[str] = None) -> dict:
        return {"X-Tenant-ID": self.tenant_id, "X-Actor-ID": actor_id or self.admin_id}


def _user(db: Session, email: str, tenant: Tenant, *roles: RoleName) -> User:
    user = User(email=email, name=email.split("@")[0])
    db.add(user)
    db.flush()
    for role in roles:
        db.add(TenantMembership(tenant_id=tenant.id, user_id=user.id, role=role.value))
    return user


@pytest.fixture
def seed(db: Session) -> TenantSeed:
    """
    One tenant with two centers, two tutors (both assigned to the main
    center), two students, a GROUP and a CLASS with both students, and a
    second tenant that must never leak into lookups.
    """
    tenant = Tenant(slug="maple", name="Maple Tutoring")
    other_tenant = Tenant(slug="birch", name="Birch Learning")
    db.add_all([tenant, other_tenant])
    db.flush()

    admin = _user(db, "admin@maple.test", tenant, RoleName.ADMIN)
    tutor = _user(db, "tutor@maple.test", tenant, RoleName.TUTOR)
    second_tutor = _user(db, "tutor2@maple.test", tenant, RoleName.TUTOR)
    parent = _user(db, "parent@maple.test", tenant, RoleName.PARENT)

    center = Center(tenant_id=tenant.id, name="Downtown", timezone="America/Edmonton")
    other_center = Center(tenant_id=tenant.id, name="Southside", timezone="America/Edmonton")
    db.add_all([center, other_center])
    db.flush()

    db.add_all(
        [
            StaffCenter(tenant_id=tenant.id, user_id=tutor.id, center_id=center.id),
            StaffCenter(tenant_id=tenant.id, user_id=tutor.id, center_id=other_center.id),
            StaffCenter(tenant_id=tenant.id, user_id=second_tutor.id, center_id=center.id),
        ]
    )

    student = Student(tenant_id=tenant.id, first_name="Ada", last_name="Lovelace")
    second_student = Student(tenant_id=tenant.id, first_name="Alan", last_name="Turing")
    db.add_all([student, second_student])
    db.flush()

    group = StudentGroup(
        tenant_id=tenant.id, center_id=center.id, name="Math Group", type=GroupType.GROUP.value
    )
    klass = StudentGroup(
        tenant_id=tenant.id, center_id=center.id, name="Grade 7 Science", type=GroupType.CLASS.value
    )
    other_center_group = StudentGroup(
        tenant_id=tenant.id,
        center_id=other_center.id,
        name="Southside Group",
        type=GroupType.GROUP.value,
    )
    db.add_all([group, klass, other_center_group])
    db.flush()

    for grp in (group, klass):
        for member in (student, second_student):
            db.add(GroupStudent(tenant_id=tenant.id, group_id=grp.id, student_id=member.id))

    db.commit()

    return TenantSeed(
        tenant_id=tenant.id,
        other_tenant_id=other_tenant.id,
        admin_id=admin.id,
        tutor_id=tutor.id,
        second_tutor_id=second_tutor.id,
        parent_id=parent.id,
        center_id=center.id,
        other_center_id=other_center.id,
        student_id=student.id,
        second_student_id=second_student.id,
        group_id=group.id,
        class_id=klass.id,
        other_center_group_id=other_center_group.id,
    )


@pytest.fixture
def make_spec(seed: TenantSeed) -> Callable[..., RecurrenceSpec]:
    """
    Build a RecurrenceSpec for the seeded tenant.

    Defaults to the March 2024 Edmonton example: Tuesdays 09:00-10:00,
    ONE_ON_ONE with the first student.
    """

    def _make(**overrides) -> RecurrenceSpec:
        values = dict(
            center_id=seed.center_id,
            tutor_id=seed.tutor_id,
            session_type=SessionType.ONE_ON_ONE,
            student_id=seed.student_id,
            group_id=None,
            start_date=date(2024, 3, 1),
            end_date=date(2024, 3, 31),
            weekdays=frozenset({2}),
            start_time=time(9, 0),
            end_time=time(10, 0),
            timezone="America/Edmonton",
            zoom_link=None,
        )
        values.update(overrides)
        return RecurrenceSpec(**values)

    return _make


@pytest.fixture
def add_session(db: Session, seed: TenantSeed) -> Callable[..., ClassSession]:
    """Insert an existing session (committed) with optional enrollments."""

    def _add(
        start_at: datetime,
        end_at: datetime,
        *,
        tutor_id: Optional[str] = None,
        center_id: Optional[str] = None,
        session_type: SessionType = SessionType.ONE_ON_ONE,
        group_id: Optional[str] = None,
        student_ids: Iterable[str] = (),
        tenant_id: Optional[str] = None,
    ) -> ClassSession:
        tenant = tenant_id or seed.tenant_id
        session = ClassSession(
            tenant_id=tenant,
            center_id=center_id or seed.center_id,
            tutor_id=tutor_id or seed.tutor_id,
            session_type=session_type.value,
            group_id=group_id,
            start_at=start_at,
            end_at=end_at,
            timezone="America/Edmonton",
        )
        db.add(session)
        db.flush()
        for student_id in student_ids:
            db.add(SessionStudent(tenant_id=tenant, session_id=session.id, student_id=student_id))
        db.commit()
        return session

    return _add
