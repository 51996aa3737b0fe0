"""Shared test fixtures"""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-cbt-portal-suite")

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from app.core.config import settings
from app.core.security import ROLE_ADMIN, ROLE_STUDENT
from app.main import app
from app.models import Base, Question, QuestionType, TestCode, TestCodeStatus, TestResult, get_db


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """File-backed SQLite so separate sessions use separate connections"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db_session(session_factory):
    """Session for arranging and inspecting data"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """API client bound to the test database"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def make_token(user_id: int, role: str) -> str:
    return jwt.encode({"sub": str(user_id), "role": role}, settings.secret_key, algorithm=settings.algorithm)


@pytest.fixture
def student_headers():
    """Authorization headers for a student id"""

    def _headers(student_id: int = 100) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(student_id, ROLE_STUDENT)}"}

    return _headers


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(1, ROLE_ADMIN)}"}


@pytest.fixture
def add_test_code(test_db_session):
    """Insert a redeemable code; keyword arguments override the defaults"""

    async def _add(**overrides) -> TestCode:
        values = {
            "code": "ABC123",
            "title": "Basic Science First CA",
            "subject_id": 1,
            "class_level": "JSS1",
            "term_id": 1,
            "session_id": 1,
            "test_type": "First CA",
            "duration_minutes": 30,
            "total_questions": 15,
            "batch_id": "batch_default",
            "is_active": True,
            "is_activated": True,
            "status": TestCodeStatus.ACTIVE,
        }
        values.update(overrides)
        test_code = TestCode(**values)
        test_db_session.add(test_code)
        await test_db_session.commit()
        return test_code

    return _add


@pytest.fixture
def add_questions(test_db_session):
    """Insert ``count`` four-option questions in one pool"""

    async def _add(count: int, **overrides) -> list[Question]:
        questions = []
        for i in range(count):
            values = {
                "subject_id": 1,
                "class_level": "JSS1",
                "term_id": 1,
                "session_id": 1,
                "question_assignment": "First CA",
                "question_text": f"Question {i + 1}",
                "option_a": f"Q{i + 1} option one",
                "option_b": f"Q{i + 1} option two",
                "option_c": f"Q{i + 1} option three",
                "option_d": f"Q{i + 1} option four",
                "correct_answer": "ABCD"[i % 4],
                "question_type": QuestionType.MULTIPLE_CHOICE,
            }
            values.update(overrides)
            questions.append(Question(**values))
        test_db_session.add_all(questions)
        await test_db_session.commit()
        return questions

    return _add


@pytest.fixture
def add_result(test_db_session):
    """Record a graded attempt for a code"""

    async def _add(test_code_id: int, student_id: int) -> TestResult:
        result = TestResult(test_code_id=test_code_id, student_id=student_id, score=10, total_questions=15)
        test_db_session.add(result)
        await test_db_session.commit()
        return result

    return _add
