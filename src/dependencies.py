"""FastAPI dependencies — lazily created storage components."""

from typing import Optional

import structlog
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncEngine

from src.attachments.manager import AttachmentManager
from src.config import settings
from src.database import create_schema, make_engine, make_session_factory
from src.intake.service import CallbackService
from src.notifications.telegram import TelegramNotifier
from src.pricing.engine import PricingEngine
from src.repositories.base import CallbackRepository
from src.repositories.json_store import JsonCallbackRepository
from src.repositories.sql_store import SqlCallbackRepository

logger = structlog.get_logger()

_repository: Optional[CallbackRepository] = None
_attachments: Optional[AttachmentManager] = None
_engine: Optional[AsyncEngine] = None


def get_repository_instance() -> CallbackRepository:
    """Get or create the configured repository (lazy init)."""
    global _repository, _engine
    if _repository is None:
        if settings.storage_backend == "sql":
            _engine = make_engine(settings.database_url)
            _repository = SqlCallbackRepository(make_session_factory(_engine))
        else:
            repository = JsonCallbackRepository(settings.callbacks_file)
            repository.ensure_document()
            _repository = repository
        logger.info("repository_ready", backend=settings.storage_backend)
    return _repository


def get_attachments_instance() -> AttachmentManager:
    global _attachments
    if _attachments is None:
        _attachments = AttachmentManager(settings.uploads_dir)
    return _attachments


async def init_storage() -> None:
    """Prepare durable storage at startup."""
    get_repository_instance()
    get_attachments_instance()
    if _engine is not None:
        await create_schema(_engine)


async def close_storage() -> None:
    global _repository, _engine
    if _engine is not None:
        await _engine.dispose()
        _engine = None
    _repository = None


async def get_repository() -> CallbackRepository:
    """FastAPI dependency for the callback repository."""
    return get_repository_instance()


async def get_attachments() -> AttachmentManager:
    """FastAPI dependency for the attachment manager."""
    return get_attachments_instance()


async def get_notifier() -> TelegramNotifier:
    return TelegramNotifier(
        settings.notify_telegram_bot_token,
        settings.notify_telegram_chat_id,
    )


async def get_pricing_engine() -> PricingEngine:
    return PricingEngine()


async def get_callback_service(
    repository: CallbackRepository = Depends(get_repository),
    attachments: AttachmentManager = Depends(get_attachments),
    notifier: TelegramNotifier = Depends(get_notifier),
) -> CallbackService:
    return CallbackService(repository, attachments, notifier)
