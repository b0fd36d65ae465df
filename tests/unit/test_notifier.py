"""Tests for the owner Telegram notification."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.notifications.telegram import TelegramNotifier


class TestTelegramNotifier:

    @pytest.mark.asyncio
    async def test_disabled_without_credentials(self, make_record):
        notifier = TelegramNotifier("", "")
        assert notifier.enabled is False
        assert await notifier.send_callback_notification(make_record()) is False

    def test_render_escapes_html(self, make_record):
        notifier = TelegramNotifier("token", "1")
        text = notifier.render(make_record(comment="<b>срочно</b> & быстро", email=""))
        assert "&lt;b&gt;срочно&lt;/b&gt; &amp; быстро" in text
        assert "Не указан" in text
        assert "Иван Петров" in text

    @pytest.mark.asyncio
    async def test_sends_message(self, make_record):
        bot = MagicMock()
        bot.send_message = AsyncMock()
        bot.session.close = AsyncMock()
        record = make_record()

        with patch("src.notifications.telegram.Bot", return_value=bot):
            sent = await TelegramNotifier("token", "12345").send_callback_notification(record)

        assert sent is True
        kwargs = bot.send_message.call_args.kwargs
        assert kwargs["chat_id"] == 12345
        assert kwargs["parse_mode"] == "HTML"
        assert record.id[:8] in kwargs["text"]
        bot.session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delivery_failure_is_reported_not_raised(self, make_record):
        bot = MagicMock()
        bot.send_message = AsyncMock(side_effect=RuntimeError("network down"))
        bot.session.close = AsyncMock()

        with patch("src.notifications.telegram.Bot", return_value=bot):
            sent = await TelegramNotifier("token", "12345").send_callback_notification(make_record())

        assert sent is False
        bot.session.close.assert_awaited_once()
