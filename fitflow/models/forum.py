# fitflow/models/forum.py
"""
Community forum models.

The vote rows are the source of truth for a post's score; ``likes`` and
``dislikes`` on the post are a cached projection recomputed from them in
the same transaction as every vote change.
"""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.ulid_helper import generate_ulid
from ..database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ForumPost(Base):
    __tablename__ = "forum_posts"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    author_email = Column(String(255), nullable=False, index=True)
    author_name = Column(String(120), nullable=True)
    author_role = Column(String(20), nullable=False)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String(500), nullable=True)

    likes = Column(Integer, nullable=False, default=0)
    dislikes = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    votes = relationship(
        "ForumVote", back_populates="post", cascade="all, delete-orphan", passive_deletes=True
    )
    comments = relationship(
        "ForumComment",
        back_populates="post",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ForumComment.created_at",
    )

    __table_args__ = (
        CheckConstraint("likes >= 0", name="ck_forum_posts_likes_non_negative"),
        CheckConstraint("dislikes >= 0", name="ck_forum_posts_dislikes_non_negative"),
    )


class ForumVote(Base):
    __tablename__ = "forum_votes"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    post_id = Column(
        String(26), ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    voter_email = Column(String(255), nullable=False)
    vote_type = Column(String(10), nullable=False)

    post = relationship("ForumPost", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("post_id", "voter_email", name="uq_forum_votes_voter"),
        CheckConstraint("vote_type IN ('like', 'dislike')", name="ck_forum_votes_type"),
    )


class ForumComment(Base):
    __tablename__ = "forum_comments"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    post_id = Column(
        String(26), ForeignKey("forum_posts.id", ondelete="CASCADE"), nullable=False, index=True
    )
    author_email = Column(String(255), nullable=False)
    author_name = Column(String(120), nullable=True)
    text = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    post = relationship("ForumPost", back_populates="comments")
