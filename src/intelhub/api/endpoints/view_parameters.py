"""List-view parameter endpoints.

A client opening a list view sends its current query string; the response
holds the merged parameters and the canonical query string to display.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from ...database.connection import get_db_session
from ...logging import get_logger
from ...views import build_view_params_from_url_and_storage, save_view_parameters
from ...views.storage import DatabaseViewStorage
from ..auth import AuthenticatedUser, get_current_user

logger = get_logger(__name__)


router = APIRouter()


class ViewParametersResponse(BaseModel):
    params: dict[str, Any]
    search: str


@router.get("/{storage_key}", response_model=ViewParametersResponse)
async def get_view_parameters(
    storage_key: str,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> ViewParametersResponse:
    """Merge the request query string over the stored parameters of the view."""
    storage = DatabaseViewStorage(db, current_user.user_id)
    saved = await build_view_params_from_url_and_storage(
        storage, storage_key, request.query_params.multi_items()
    )
    await db.commit()
    logger.debug("View parameters restored", storage_key=storage_key, keys=sorted(saved.params))
    return ViewParametersResponse(params=saved.params, search=saved.search)


@router.put("/{storage_key}", response_model=ViewParametersResponse)
async def put_view_parameters(
    storage_key: str,
    body: dict[str, Any],
    db: AsyncSession = Depends(get_db_session),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> ViewParametersResponse:
    """Replace the stored parameters of the view."""
    storage = DatabaseViewStorage(db, current_user.user_id)
    saved = await save_view_parameters(storage, storage_key, body)
    await db.commit()
    logger.debug("View parameters saved", storage_key=storage_key)
    return ViewParametersResponse(params=saved.params, search=saved.search)
