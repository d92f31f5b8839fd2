"""Blog Routes — CRUD, comments, and author statistics for blogs.

Invariants:
    - Routes never contain business logic (delegate to BlogMutationService / list_helpers)
    - Path ids are taken as raw strings: malformed ids are a 400, not a 422 or 404
    - /stats is registered before /{blog_id} so it is never parsed as an id

Design Decisions:
    - Create and delete require a bearer token. Update reads one only when
      owner_only_updates is set; comments never do (ADR: adopted ownership policy)
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Response, status

from app.core.domain_types import UserIdentity
from app.core.list_helpers import blog_statistics
from app.api.dependencies import get_blog_service, require_identity, update_identity
from app.schemas.blog import (
    BlogCreate, BlogResponse, BlogStatisticsResponse, BlogUpdate,
    CommentCreate, to_blog_response,
)
from app.services.blog_mutations import BlogMutationService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/blogs", tags=["blogs"])


@router.get("", response_model=list[BlogResponse])
async def list_blogs(service: BlogMutationService = Depends(get_blog_service)):
    """List all blogs with owner summary."""
    return [to_blog_response(b) for b in await service.list_all()]


@router.get("/stats", response_model=BlogStatisticsResponse)
async def get_blog_statistics(
    service: BlogMutationService = Depends(get_blog_service),
):
    """Total likes, favorite blog, and top authors over all blogs."""
    stats = blog_statistics(await service.list_all())
    return BlogStatisticsResponse.model_validate(asdict(stats))


@router.get("/{blog_id}", response_model=BlogResponse)
async def get_blog(
    blog_id: str, service: BlogMutationService = Depends(get_blog_service),
):
    return to_blog_response(await service.get(blog_id))


@router.post(
    "", response_model=BlogResponse, status_code=status.HTTP_201_CREATED,
)
async def create_blog(
    body: BlogCreate,
    identity: UserIdentity = Depends(require_identity),
    service: BlogMutationService = Depends(get_blog_service),
):
    """Create a blog owned by the caller."""
    return to_blog_response(await service.create(identity, body))


@router.put("/{blog_id}", response_model=BlogResponse)
async def update_blog(
    blog_id: str,
    body: BlogUpdate,
    identity: UserIdentity | None = Depends(update_identity),
    service: BlogMutationService = Depends(get_blog_service),
):
    """Update title, author, url or likes. Owner is never changed."""
    return to_blog_response(await service.update(blog_id, body, identity))


@router.post("/{blog_id}/comments", response_model=BlogResponse)
async def add_comment(
    blog_id: str,
    body: CommentCreate,
    service: BlogMutationService = Depends(get_blog_service),
):
    return to_blog_response(await service.append_comment(blog_id, body.comment))


@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_blog(
    blog_id: str,
    identity: UserIdentity = Depends(require_identity),
    service: BlogMutationService = Depends(get_blog_service),
):
    """Delete a blog. Only its owner may do so."""
    await service.delete(identity, blog_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
