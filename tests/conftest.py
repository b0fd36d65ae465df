"""Test fixtures and configuration."""

import os
import tempfile

# Point the app at a scratch data dir before src.config is imported
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="callback-desk-"))
os.environ.setdefault("NOTIFY_TELEGRAM_BOT_TOKEN", "")
os.environ.setdefault("NOTIFY_TELEGRAM_CHAT_ID", "")

import uuid
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from src.attachments.manager import AttachmentManager
from src.database import create_schema, make_engine, make_session_factory
from src.dependencies import get_attachments, get_notifier, get_repository
from src.intake.service import CallbackService
from src.main import app
from src.notifications.telegram import TelegramNotifier
from src.repositories.json_store import JsonCallbackRepository
from src.repositories.sql_store import SqlCallbackRepository
from src.schemas.callback import CallbackRequest, CallbackStatus

BASE_TIME = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def make_record():
    """Factory for records with controllable creation time."""

    def _make(minutes: int = 0, **fields) -> CallbackRequest:
        data = {
            "id": uuid.uuid4().hex,
            "name": "Иван Петров",
            "phone": "+79035551234",
            "email": "ivan@example.ru",
            "product_type": "Ангар",
            "comment": "Нужен расчёт",
            "status": CallbackStatus.NEW,
            "date": BASE_TIME + timedelta(minutes=minutes),
        }
        data.update(fields)
        return CallbackRequest(**data)

    return _make


@pytest.fixture
def json_repository(tmp_path):
    """JSON repository backed by a fresh document."""
    repository = JsonCallbackRepository(tmp_path / "callbacks.json")
    repository.ensure_document()
    return repository


@pytest_asyncio.fixture(params=["json", "sql"])
async def repository(request, tmp_path):
    """Each storage backend in turn: JSON document, then SQLite."""
    if request.param == "json":
        repository = JsonCallbackRepository(tmp_path / "callbacks.json")
        repository.ensure_document()
        yield repository
        return

    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'callbacks.db'}")
    await create_schema(engine)
    yield SqlCallbackRepository(make_session_factory(engine))
    await engine.dispose()


@pytest.fixture
def attachments(tmp_path):
    return AttachmentManager(tmp_path / "uploads")


@pytest.fixture
def disabled_notifier():
    return TelegramNotifier("", "")


@pytest.fixture
def service(json_repository, attachments, disabled_notifier):
    return CallbackService(json_repository, attachments, disabled_notifier)


@pytest.fixture
def client(json_repository, attachments, disabled_notifier):
    """TestClient wired to per-test storage."""

    async def _repository():
        return json_repository

    async def _attachments():
        return attachments

    async def _notifier():
        return disabled_notifier

    app.dependency_overrides[get_repository] = _repository
    app.dependency_overrides[get_attachments] = _attachments
    app.dependency_overrides[get_notifier] = _notifier
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
