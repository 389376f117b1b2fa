import asyncio
import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.cache import (
    RedisCache,
    cache_get_one,
    cache_set,
    dump_list,
    dump_one,
    get_cache,
    invalidate_all_properties,
    invalidate_property,
    key_properties_list,
    key_property,
)
from src.common.exception_handlers import handle_view_exception
from src.common.exceptions import NotFoundException
from src.config import settings
from src.database.sessions import get_async_session
from src.properties.crud import property_crud
from src.properties.responses import (
    CREATE_RESPONSES,
    DELETE_RESPONSES,
    GET_BY_ID_RESPONSES,
    GET_RESPONSES,
)
from src.properties.schemas import (
    PropertyCreate,
    PropertyInfo,
    PropertyUpdate,
)


router = APIRouter()

logger = logging.getLogger('app')

PROPERTY_NOT_FOUND = 'Объект размещения не найден.'


@router.get(
    '',
    response_model=list[PropertyInfo],
    summary='Получение списка объектов размещения.',
    description=(
        'Список объектов размещения, отсортированный по названию. '
        'По умолчанию только активные.'
    ),
    responses=GET_RESPONSES,
)
async def get_all_properties(
    show_all: bool = Query(
        False,
        title='Показывать все объекты?',
        description='Включать деактивированные объекты.',
    ),
    db: AsyncSession = Depends(get_async_session),
    cache: RedisCache = Depends(get_cache),
) -> list[PropertyInfo]:
    """Получение списка объектов размещения."""
    try:

        async def load() -> list[dict]:
            objs = await property_crud.list_properties(db, show_all=show_all)
            return dump_list(PropertyInfo, objs)

        payload = await cache.get_or_set(
            key_properties_list(show_all),
            load,
            ttl=settings.cache.TTL_PROPERTIES_LIST,
        )
        logger.info(
            'GET /properties: найдено %d (show_all=%s)',
            len(payload),
            show_all,
        )
        return [PropertyInfo.model_validate(item) for item in payload]

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении списка объектов')


@router.post(
    '',
    response_model=PropertyInfo,
    status_code=status.HTTP_201_CREATED,
    summary='Создание объекта размещения.',
    responses=CREATE_RESPONSES,
)
async def create_property(
    property_data: PropertyCreate,
    db: AsyncSession = Depends(get_async_session),
) -> PropertyInfo:
    """Создает новый объект размещения."""
    logger.info('Создание объекта размещения %s', property_data.name)
    try:
        obj = await property_crud.create(db, obj_in=property_data)
        await invalidate_all_properties()

        logger.info(
            'Объект %s (%s) успешно создан',
            obj.id,
            obj.name,
            extra={'property_id': str(obj.id)},
        )
        return PropertyInfo.model_validate(obj)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'создании объекта')


@router.get(
    '/{property_id}',
    response_model=PropertyInfo,
    summary='Получение объекта размещения по ID.',
    responses=GET_BY_ID_RESPONSES,
)
async def get_property_by_id(
    property_id: UUID,
    db: AsyncSession = Depends(get_async_session),
    cache: RedisCache = Depends(get_cache),
) -> PropertyInfo:
    """Получение объекта размещения по его ID."""
    extra = {'property_id': str(property_id)}
    try:
        key = key_property(property_id)
        cached = await cache_get_one(cache, key, PropertyInfo)
        if cached is not None:
            return PropertyInfo.model_validate(cached)

        obj = await property_crud.get(db, id=property_id)
        if obj is None:
            raise NotFoundException(PROPERTY_NOT_FOUND)

        await cache_set(
            cache,
            key,
            dump_one(PropertyInfo, obj),
            ttl=settings.cache.TTL_PROPERTY,
        )
        return PropertyInfo.model_validate(obj)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'получении объекта', extra)


@router.patch(
    '/{property_id}',
    response_model=PropertyInfo,
    summary='Обновление объекта размещения.',
    description='Частичное обновление: название и флаг активности.',
    responses=GET_BY_ID_RESPONSES,
)
async def update_property(
    property_id: UUID,
    property_data: PropertyUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> PropertyInfo:
    """Частично обновляет объект размещения."""
    extra = {'property_id': str(property_id)}
    try:
        obj = await property_crud.get(db, id=property_id)
        if obj is None:
            raise NotFoundException(PROPERTY_NOT_FOUND)

        obj = await property_crud.update(
            db,
            db_obj=obj,
            obj_in=property_data,
        )
        await invalidate_property(property_id)

        logger.info('Объект %s обновлен', property_id, extra=extra)
        return PropertyInfo.model_validate(obj)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'обновлении объекта', extra)


@router.delete(
    '/{property_id}',
    status_code=status.HTTP_204_NO_CONTENT,
    summary='Удаление объекта размещения.',
    description='Мягкое удаление: объект помечается неактивным.',
    responses=DELETE_RESPONSES,
)
async def delete_property(
    property_id: UUID,
    db: AsyncSession = Depends(get_async_session),
) -> Response:
    """Мягко удаляет объект размещения."""
    extra = {'property_id': str(property_id)}
    try:
        obj = await property_crud.get(db, id=property_id)
        if obj is None:
            raise NotFoundException(PROPERTY_NOT_FOUND)

        await property_crud.soft_delete(db, obj)
        await invalidate_property(property_id)

        logger.info('Объект %s деактивирован', property_id, extra=extra)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    except asyncio.CancelledError:
        raise

    except Exception as e:
        handle_view_exception(e, 'удалении объекта', extra)
