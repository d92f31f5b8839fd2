"""Testing Routes — database reset for end-to-end test suites.

Invariants:
    - Only registered when settings.enable_testing_routes is true (never in production)
    - Reset deletes blogs before users (blogs.user_id references users.id)
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.models.blog import Blog
from app.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/testing", tags=["testing"])


@router.post("/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_database(db: AsyncSession = Depends(get_db)):
    await db.execute(delete(Blog))
    await db.execute(delete(User))
    await db.commit()
    logger.warning("Database reset via testing route")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
