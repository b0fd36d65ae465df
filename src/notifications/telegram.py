"""Telegram notification service — tells the site owner about new callback requests."""

from aiogram import Bot
import structlog

from src.schemas.callback import CallbackRequest

logger = structlog.get_logger()

CALLBACK_TEMPLATE_RU = """🔔 <b>Новая заявка на обратный звонок!</b>

👤 <b>Имя:</b> {name}
📞 <b>Телефон:</b> {phone}
✉️ <b>Email:</b> {email}
🏗 <b>Продукция:</b> {product_type}
💬 <b>Комментарий:</b> {comment}
📎 <b>Файл:</b> {file_name}

<i>Заявка #{callback_id}</i>"""


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


class TelegramNotifier:
    """Sends callback cards to the owner chat. Never raises on delivery failure."""

    def __init__(self, bot_token: str, chat_id: str):
        self.bot_token = bot_token
        self.chat_id = chat_id

    @property
    def enabled(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    def render(self, record: CallbackRequest) -> str:
        return CALLBACK_TEMPLATE_RU.format(
            name=_escape(record.name),
            phone=_escape(record.phone),
            email=_escape(record.email) or "Не указан",
            product_type=_escape(record.product_type) or "Не указана",
            comment=_escape(record.comment) or "—",
            file_name=_escape(record.file_name or "") or "нет",
            callback_id=record.id[:8],
        )

    async def send_callback_notification(self, record: CallbackRequest) -> bool:
        """Send a new-callback card to the owner.

        Returns:
            True if sent successfully, False if disabled or delivery failed
        """
        if not self.enabled:
            return False

        bot = None
        try:
            bot = Bot(token=self.bot_token)
            await bot.send_message(
                chat_id=int(self.chat_id),
                text=self.render(record),
                parse_mode="HTML",
            )
            logger.info("callback_notification_sent", callback_id=record.id)
            return True

        except Exception as e:
            logger.error(
                "callback_notification_failed",
                error=str(e),
                callback_id=record.id,
            )
            return False

        finally:
            if bot is not None:
                await bot.session.close()
