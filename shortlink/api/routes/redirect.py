"""URL redirection endpoint with click tracking."""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import RedirectResponse

from shortlink.api import schemas
from shortlink.api.dependencies import get_redirect_service
from shortlink.db.session import get_db
from shortlink.middleware.logging import get_client_ip
from shortlink.services.exceptions import ShortURLNotFoundError
from shortlink.services.redirect import RedirectService

router = APIRouter(tags=["redirect"])


@router.get(
    "/{shortcode}",
    response_class=RedirectResponse,
    status_code=status.HTTP_302_FOUND,
    responses={
        404: {"model": schemas.ErrorResponse, "description": "Short URL not found"},
        410: {"model": schemas.ErrorResponse, "description": "Short URL has expired"},
    }
)
async def redirect_to_original_url(
    request: Request,
    shortcode: str,
    db: AsyncSession = Depends(get_db),
    redirect_service: RedirectService = Depends(get_redirect_service),
):
    """Record the click and redirect to the original URL."""
    try:
        url = await redirect_service.resolve(db, shortcode)
        if redirect_service.is_expired(url):
            raise HTTPException(status_code=410, detail=f"Short URL '{shortcode}' has expired")

        original_url = url.original_url
        await redirect_service.record_click(
            db,
            shortcode,
            referrer=request.headers.get("referer"),
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("user-agent"),
        )
    except ShortURLNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return RedirectResponse(url=original_url, status_code=status.HTTP_302_FOUND)
