from datetime import date, datetime
from zoneinfo import ZoneInfo

from src.config import settings


def today_local() -> date:
    """Сегодняшняя дата в часовом поясе гостевого дома."""
    return datetime.now(ZoneInfo(settings.app.TIMEZONE)).date()
