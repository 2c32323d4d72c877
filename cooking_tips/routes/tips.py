"""
Cooking Tips Backend — Tip Route Handlers
===========================================

What:  The /api/tips endpoint set: tips, ratings and comments.
Why:   HTTP entry point for the cooking tips feature.
How:   Resolves the caller (security.get_caller_id) and a TipService wired to
       the configured store, then delegates. No business rules in here.

Status codes (via global exception handlers):
    200  success (including `null` bodies for tip-of-the-day with no tips
         and for updates that changed nothing)
    400  ValidationError (e.g. rating outside 1..5)
    401  missing/invalid bearer token
    403  UnauthorizedError (caller does not own the tip/comment)
    404  NotFoundError (tip or comment absent)
"""

import logging
from typing import AsyncGenerator, List, Optional

from fastapi import APIRouter, Depends, Query

from cooking_tips.config import settings
from cooking_tips.database import session_scope
from cooking_tips.exceptions import UnauthorizedError
from cooking_tips.schemas.tip import (
    Comment,
    CommentCreate,
    CommentUpdate,
    ErrorResponse,
    MessageResponse,
    Tip,
    TipCreate,
    TipUpdate,
)
from cooking_tips.security import get_caller_id
from cooking_tips.services.tip_service import TipService
from cooking_tips.stores.memory import memory_tip_store, memory_user_directory
from cooking_tips.stores.sql import SqlTipStore, SqlUserDirectory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tips", tags=["Tips"])

NOT_FOUND = {404: {"description": "Tip not found", "model": ErrorResponse}}
FORBIDDEN = {403: {"description": "Caller is not the owner", "model": ErrorResponse}}
UNAUTHENTICATED = {401: {"description": "Missing or invalid token", "model": ErrorResponse}}


async def get_tip_service() -> AsyncGenerator[TipService, None]:
    """
    FastAPI dependency: a TipService over the configured store backend.

    sql:    store and user directory share one session; the request's
            writes are committed together after the handler returns.
    memory: the process-wide in-memory store.
    """
    options = {
        "admin_ids": settings.admin_user_ids_list,
        "strict_rating_bounds": settings.strict_rating_bounds,
    }
    if settings.tip_store_backend == "memory":
        yield TipService(memory_tip_store, memory_user_directory, **options)
        return

    async with session_scope() as session:
        yield TipService(SqlTipStore(session), SqlUserDirectory(session), **options)


# ══════════════════════════════════════════════════════════════════════════
# Collection endpoints
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "",
    response_model=Tip,
    responses={**UNAUTHENTICATED},
    summary="Create a tip",
)
async def create_tip(
    body: TipCreate,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Tip:
    """The caller becomes the author; ratings and comments start empty."""
    return await service.create(
        title=body.title,
        description=body.description,
        category=body.category,
        caller_id=caller_id,
    )


@router.get("", response_model=List[Tip], summary="List all tips")
async def list_tips(service: TipService = Depends(get_tip_service)) -> List[Tip]:
    return await service.list_all()


@router.get(
    "/my",
    response_model=List[Tip],
    responses={**UNAUTHENTICATED},
    summary="List the caller's tips",
)
async def list_my_tips(
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> List[Tip]:
    return await service.list_mine(caller_id)


@router.get("/search", response_model=List[Tip], summary="Search tips by title")
async def search_tips(
    title: str = Query(..., description="Case-insensitive title fragment"),
    service: TipService = Depends(get_tip_service),
) -> List[Tip]:
    return await service.search(title)


@router.get("/category", response_model=List[Tip], summary="List tips in a category")
async def list_tips_by_category(
    category: str = Query(..., description="Exact category name, e.g. 'Storage'"),
    service: TipService = Depends(get_tip_service),
) -> List[Tip]:
    return await service.list_by_category(category)


@router.get("/featured", response_model=List[Tip], summary="List featured tips")
async def list_featured_tips(service: TipService = Depends(get_tip_service)) -> List[Tip]:
    return await service.list_featured()


@router.get(
    "/tip-of-the-day",
    response_model=Optional[Tip],
    summary="The most-rated tip",
    description="Tip with the highest rating count; `null` when there are no tips.",
)
async def tip_of_the_day(service: TipService = Depends(get_tip_service)) -> Optional[Tip]:
    return await service.tip_of_the_day()


# ══════════════════════════════════════════════════════════════════════════
# Single tip endpoints
# ══════════════════════════════════════════════════════════════════════════


@router.get("/{tip_id}", response_model=Tip, responses={**NOT_FOUND}, summary="Get a tip")
async def get_tip(tip_id: str, service: TipService = Depends(get_tip_service)) -> Tip:
    return await service.get(tip_id)


@router.put(
    "/{tip_id}",
    response_model=Optional[Tip],
    responses={**UNAUTHENTICATED},
    summary="Update a tip (author only)",
    description=(
        "Overwrites title, description and category. Returns `null` and changes "
        "nothing when the tip does not exist or the caller is not its author."
    ),
)
async def update_tip(
    tip_id: str,
    body: TipUpdate,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Optional[Tip]:
    return await service.update(
        tip_id,
        title=body.title,
        description=body.description,
        category=body.category,
        caller_id=caller_id,
    )


@router.put(
    "/{tip_id}/featured",
    response_model=Tip,
    responses={**UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND},
    summary="Feature or unfeature a tip (administrators only)",
)
async def set_tip_featured(
    tip_id: str,
    featured: bool = Query(True),
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Tip:
    return await service.set_featured(tip_id, featured, caller_id)


@router.put(
    "/{tip_id}/rate",
    response_model=Tip,
    responses={
        **UNAUTHENTICATED,
        **FORBIDDEN,
        **NOT_FOUND,
        400: {"description": "Rating out of range", "model": ErrorResponse},
    },
    summary="Rate a tip",
    description=(
        "Records the caller's rating, replacing any earlier one, and returns the "
        "tip with recomputed averageRating and ratingCount. `userId`, if given, "
        "must be the caller."
    ),
)
async def rate_tip(
    tip_id: str,
    rating: int = Query(..., description="1 (poor) to 5 (great)"),
    user_id: Optional[str] = Query(None, alias="userId"),
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Tip:
    rater_id = user_id or caller_id
    if rater_id != caller_id:
        logger.warning("User %s tried to rate tip %s as %s", caller_id, tip_id, rater_id)
        raise UnauthorizedError(
            message="Ratings can only be submitted for yourself",
            context={"tip_id": tip_id},
        )
    return await service.rate(tip_id, rating, rater_id)


@router.get(
    "/{tip_id}/user-rating",
    response_model=int,
    summary="A user's rating of a tip",
    description="Always 200: returns 0 when the tip or the rating does not exist.",
)
async def get_user_rating(
    tip_id: str,
    user_id: str = Query(..., alias="userId"),
    service: TipService = Depends(get_tip_service),
) -> int:
    return await service.get_user_rating(tip_id, user_id)


@router.delete(
    "/{tip_id}",
    response_model=MessageResponse,
    responses={**UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND},
    summary="Delete a tip (author only)",
)
async def delete_tip(
    tip_id: str,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> MessageResponse:
    await service.delete(tip_id, caller_id)
    return MessageResponse(message="Tip deleted successfully")


# ══════════════════════════════════════════════════════════════════════════
# Comments
# ══════════════════════════════════════════════════════════════════════════


@router.post(
    "/{tip_id}/comments",
    response_model=Comment,
    responses={**UNAUTHENTICATED, **NOT_FOUND},
    summary="Comment on a tip",
)
async def add_comment(
    tip_id: str,
    body: CommentCreate,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Comment:
    return await service.add_comment(tip_id, body.text, body.rating, caller_id)


@router.get(
    "/{tip_id}/comments",
    response_model=List[Comment],
    responses={**NOT_FOUND},
    summary="List a tip's comments (newest first)",
)
async def list_comments(tip_id: str, service: TipService = Depends(get_tip_service)) -> List[Comment]:
    return await service.list_comments(tip_id)


@router.put(
    "/{tip_id}/comments/{comment_id}",
    response_model=Comment,
    responses={**UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND},
    summary="Edit your comment",
)
async def update_comment(
    tip_id: str,
    comment_id: str,
    body: CommentUpdate,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> Comment:
    return await service.update_comment(tip_id, comment_id, body.text, body.rating, caller_id)


@router.delete(
    "/{tip_id}/comments/{comment_id}",
    response_model=MessageResponse,
    responses={**UNAUTHENTICATED, **FORBIDDEN, **NOT_FOUND},
    summary="Delete your comment",
)
async def delete_comment(
    tip_id: str,
    comment_id: str,
    caller_id: str = Depends(get_caller_id),
    service: TipService = Depends(get_tip_service),
) -> MessageResponse:
    await service.delete_comment(tip_id, comment_id, caller_id)
    return MessageResponse(message="Comment deleted")
