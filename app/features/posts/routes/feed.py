from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.posts.services.feed import FEED_PATH, get_feed_items, render_atom_feed
from app.platform.db.session import get_db

router = APIRouter(tags=["Feed"])


@router.get(FEED_PATH, summary="Atom feed of published posts")
async def posts_feed(db: AsyncSession = Depends(get_db)):
    items = await get_feed_items(db)
    return Response(content=render_atom_feed(items), media_type="application/atom+xml")
