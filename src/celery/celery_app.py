from celery.schedules import crontab

from celery import Celery
from src.celery.utils import build_redis_url
from src.config import settings
import src.models  # noqa: F401


TASK_MODULES = ['src.celery.tasks.room_status']

# Поля CelerySettings, которые не являются ключами конфигурации Celery
_NOT_CELERY_KEYS = {'BROKER_DB', 'RESULT_DB', 'ROOM_SYNC_HOUR'}


def _redis_url(db: int) -> str:
    return build_redis_url(settings.redis.URL, settings.redis.PASSWORD, db)


celery_app = Celery('guest_house', include=TASK_MODULES)

celery_app.conf.update(
    {
        name.lower(): value
        for name, value in settings.celery.model_dump(
            exclude=_NOT_CELERY_KEYS,
        ).items()
    },
    broker_url=_redis_url(settings.celery.BROKER_DB),
    result_backend=(
        None
        if settings.celery.TASK_IGNORE_RESULT
        else _redis_url(settings.celery.RESULT_DB)
    ),
    beat_schedule={
        'sync-room-statuses': {
            'task': 'src.celery.tasks.room_status.sync_room_statuses',
            'schedule': crontab(
                minute=0,
                hour=settings.celery.ROOM_SYNC_HOUR,
            ),
        },
    },
)
