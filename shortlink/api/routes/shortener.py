from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.api import schemas
from shortlink.api.dependencies import get_shortener_service, get_stats_service
from shortlink.db.session import get_db
from shortlink.services.exceptions import (
    GenerationExhaustedError,
    InvalidShortcodeError,
    InvalidURLError,
    InvalidValidityError,
    ShortcodeConflictError,
    ShortURLNotFoundError,
)
from shortlink.services.shortener import ShortenedURLService
from shortlink.services.stats import StatsService

router = APIRouter(tags=["shortener"])


@router.post(
    "/shorturls",
    response_model=schemas.ShortURLCreateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": schemas.ErrorResponse, "description": "Invalid validity or shortcode"},
        409: {"model": schemas.ErrorResponse, "description": "Shortcode already exists"},
        503: {"model": schemas.ErrorResponse, "description": "No free shortcode could be generated"},
    }
)
async def create_short_url(
    url_data: schemas.ShortURLCreateRequest,
    db: AsyncSession = Depends(get_db),
    shortener_service: ShortenedURLService = Depends(get_shortener_service),
):
    try:
        created = await shortener_service.create_short_url(
            db=db,
            original_url=url_data.url,
            validity_minutes=url_data.validity,
            custom_shortcode=url_data.shortcode,
        )
    except (InvalidURLError, InvalidValidityError, InvalidShortcodeError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ShortcodeConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GenerationExhaustedError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return schemas.ShortURLCreateResponse(
        short_link=created.short_link,
        expiry=created.expiry,
        shortcode=created.shortcode,
    )


@router.get(
    "/shorturls/{shortcode}",
    response_model=schemas.URLStatsResponse,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"}
    }
)
async def get_url_stats(
    shortcode: str = Path(..., description="The shortcode of the URL"),
    db: AsyncSession = Depends(get_db),
    stats_service: StatsService = Depends(get_stats_service),
):
    try:
        stats = await stats_service.get_stats(db, shortcode)
    except ShortURLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return schemas.URLStatsResponse(**stats)
