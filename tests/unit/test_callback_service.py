"""Tests for the intake service: submit and delete with attachments."""

from unittest.mock import AsyncMock, patch

import pytest

from src.errors import PersistenceError, UnsupportedMediaType, ValidationError
from src.intake.service import CallbackService, IncomingFile


class TestSubmit:

    @pytest.mark.asyncio
    async def test_submit_without_file(self, service, json_repository):
        record = await service.submit(" Иван ", "+7900", comment=" Нужен навес ")

        stored = await json_repository.get(record.id)
        assert stored.name == "Иван"
        assert stored.comment == "Нужен навес"
        assert stored.file is None

    @pytest.mark.asyncio
    async def test_submit_with_file(self, service, attachments):
        upload = IncomingFile(b"\x89PNG...", "фасад.png", "image/png")
        record = await service.submit("Иван", "+7900", upload=upload)

        assert record.file_name == "фасад.png"
        assert attachments.path_for(record.file).read_bytes() == b"\x89PNG..."

    @pytest.mark.asyncio
    async def test_validation_runs_before_file_is_stored(self, service, attachments):
        upload = IncomingFile(b"data", "plan.pdf", "application/pdf")
        with pytest.raises(ValidationError):
            await service.submit("", "+7900", upload=upload)
        assert list(attachments.uploads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_rejected_file_stores_nothing(self, service, json_repository):
        with pytest.raises(UnsupportedMediaType):
            await service.submit("Иван", "+7900", upload=IncomingFile(b"MZ", "tool.exe"))
        assert await json_repository.list_all() == []

    @pytest.mark.asyncio
    async def test_attachment_removed_when_append_fails(self, service, attachments):
        upload = IncomingFile(b"data", "plan.pdf", "application/pdf")
        with patch.object(
            service.repository, "append", AsyncMock(side_effect=PersistenceError("disk full"))
        ):
            with pytest.raises(PersistenceError):
                await service.submit("Иван", "+7900", upload=upload)
        assert list(attachments.uploads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_notifier_called(self, json_repository, attachments):
        notifier = AsyncMock()
        service = CallbackService(json_repository, attachments, notifier)

        record = await service.submit("Иван", "+7900")
        notifier.send_callback_notification.assert_awaited_once_with(record)


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_removes_attachment(self, service, attachments, json_repository):
        upload = IncomingFile(b"data", "plan.dxf")
        record = await service.submit("Иван", "+7900", upload=upload)
        path = attachments.path_for(record.file)
        assert path.exists()

        await service.delete(record.id)
        assert not path.exists()
        assert await json_repository.list_all() == []

    @pytest.mark.asyncio
    async def test_delete_with_file_already_gone(self, service, attachments):
        record = await service.submit("Иван", "+7900", upload=IncomingFile(b"d", "a.gif"))
        attachments.path_for(record.file).unlink()

        removed = await service.delete(record.id)
        assert removed.id == record.id
