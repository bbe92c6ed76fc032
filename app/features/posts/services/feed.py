import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.features.posts.models.post import Post
from app.platform.config import settings

current_dir = os.path.dirname(os.path.abspath(__file__))
template_dir = os.path.join(current_dir, "../template")

env = Environment(loader=FileSystemLoader(template_dir), autoescape=select_autoescape(["xml"]))

FEED_PATH = "/posts/feed"


@dataclass
class FeedItem:
    id: str
    title: str
    summary: str
    link: str
    author: str
    updated: datetime


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back naive
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _rfc3339(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


async def get_feed_items(db: AsyncSession, limit: Optional[int] = None) -> List[FeedItem]:
    now = datetime.now(timezone.utc)
    result = await db.execute(
        select(Post)
        .where(Post.published_at.is_not(None), Post.published_at <= now)
        .order_by(Post.published_at.desc())
        .limit(limit or settings.FEED_ITEM_LIMIT)
    )

    base_url = settings.FEED_BASE_URL.rstrip("/")
    return [
        FeedItem(
            id=f"{base_url}/posts/{post.slug}",
            title=post.title,
            summary=post.summary or "",
            link=f"{base_url}/posts/{post.slug}",
            author=post.author_name or settings.APP_NAME,
            updated=_as_utc(post.published_at),
        )
        for post in result.scalars().all()
    ]


def render_atom_feed(items: List[FeedItem]) -> str:
    base_url = settings.FEED_BASE_URL.rstrip("/")
    updated = max((item.updated for item in items), default=datetime.now(timezone.utc))

    template = env.get_template("atom.xml")
    return template.render(
        title=settings.FEED_TITLE,
        description=settings.FEED_DESCRIPTION,
        language=settings.FEED_LANGUAGE,
        feed_url=f"{base_url}{FEED_PATH}",
        site_url=base_url,
        updated=_rfc3339(updated),
        items=[dict(item.__dict__, updated=_rfc3339(item.updated)) for item in items],
    )
