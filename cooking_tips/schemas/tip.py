"""
Cooking Tips Backend — Pydantic Documents and API Schemas
===========================================================

What:  The `Tip` / `Comment` documents plus request and response bodies.
Why:   A tip is persisted and returned as one document, so the same model
       serves as the store's unit of persistence and as the API contract.
How:   Python attributes are snake_case; JSON uses camelCase aliases
       (`authorId`, `averageRating`, ...) generated by `to_camel`. Both
       spellings are accepted on input.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_document_config = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
)


# ══════════════════════════════════════════════════════════════════════════
# Documents: what the store persists and the API returns
# ══════════════════════════════════════════════════════════════════════════


class Comment(BaseModel):
    """
    A comment embedded in a tip.

    `rating` belongs to the comment only; it never feeds the tip's
    aggregate rating.
    """
    model_config = _document_config

    id: str = Field(description="Random unique comment identifier")
    author_id: str = Field(description="User id of the comment author")
    author_display_name: str = Field(default="", description="Author name at the time of writing")
    text: str = Field(default="", description="Comment body")
    rating: int = Field(default=0, description="Comment-local rating")
    created_at: str = Field(description="ISO 8601 UTC timestamp")


class Tip(BaseModel):
    """
    One user-submitted cooking tip.

    Derived fields (kept consistent by TipService on every write):
        rating_count   == len(user_ratings)
        average_rating == mean(user_ratings.values()), 0 when empty
        review_count   == len(comments)
    """
    model_config = _document_config

    id: Optional[str] = Field(default=None, description="Assigned by the store on first save")
    title: str = Field(default="")
    description: str = Field(default="")
    category: str = Field(default="", description="Storage, Prep, Substitutes, ...")
    author_id: str = Field(default="")
    author_display_name: str = Field(default="")
    created_at: Optional[datetime] = Field(default=None, description="Set once at creation (UTC)")
    featured: bool = Field(default=False, description="Administrator-set highlight flag")
    user_ratings: Dict[str, int] = Field(default_factory=dict, description="User id → rating")
    average_rating: float = Field(default=0.0)
    rating_count: int = Field(default=0)
    comments: List[Comment] = Field(default_factory=list, description="Newest first")
    review_count: int = Field(default=0)


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TipCreate(BaseModel):
    """Body of POST /api/tips. Author, timestamps and ratings are server-set."""
    model_config = _document_config

    title: str = Field(description="Short tip title")
    description: str = Field(default="", description="The tip itself")
    category: str = Field(default="", description="Storage, Prep, Substitutes, ...")


class TipUpdate(BaseModel):
    """Body of PUT /api/tips/{id}. All three mutable fields are overwritten."""
    model_config = _document_config

    title: str
    description: str
    category: str


class CommentCreate(BaseModel):
    """Body of POST /api/tips/{id}/comments."""
    model_config = _document_config

    text: str
    rating: int = 0


class CommentUpdate(BaseModel):
    """Body of PUT /api/tips/{tipId}/comments/{commentId}."""
    model_config = _document_config

    text: str
    rating: int = 0


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "tip with ID 'abc' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Active document store backend: sql, memory")
    database: str = Field(description="Database connectivity: connected, disconnected, unused")
    uptime_seconds: float = Field(description="Seconds since service started")
