from sqlalchemy import Column, DateTime, String, Text

from app.platform.db.base import BaseModel


class Post(BaseModel):
    __tablename__ = "posts"

    title = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False, index=True)
    summary = Column(Text, nullable=True)
    content = Column(Text, nullable=True)
    author_name = Column(String(255), nullable=True)

    # Drafts have no publication date and never appear in the feed
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self):
        return f"<Post(id={self.id}, slug={self.slug})>"
