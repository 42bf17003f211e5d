# fitflow/repositories/forum_repository.py
"""
Forum Repository for the FitFlow platform.

Posts, comments and per-voter vote rows. ``recompute_counts`` rewrites a
post's like/dislike counters from its vote rows in one statement; it is
the only writer of those counters.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..core.enums import VoteType
from ..core.exceptions import RepositoryException
from ..models.forum import ForumComment, ForumPost, ForumVote
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def _count_votes(post_id: str, kind: VoteType):
    return (
        select(func.count(ForumVote.id))
        .where(and_(ForumVote.post_id == post_id, ForumVote.vote_type == kind.value))
        .scalar_subquery()
    )


class ForumRepository(BaseRepository[ForumPost]):
    def __init__(self, db: Session):
        super().__init__(db, ForumPost)

    def list_page(self, *, skip: int, limit: int) -> Tuple[List[ForumPost], int]:
        try:
            total = self.db.query(func.count(ForumPost.id)).scalar() or 0
            posts = (
                self.db.query(ForumPost)
                .order_by(ForumPost.created_at.desc(), ForumPost.id.desc())
                .offset(skip)
                .limit(limit)
                .all()
            )
            return posts, int(total)
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing forum posts: {str(e)}")
            raise RepositoryException(f"Failed to list posts: {str(e)}")

    def get_with_comments(self, post_id: str) -> Optional[ForumPost]:
        """Counters are rewritten by bulk UPDATE, so always reload from the row."""
        try:
            return (
                self.db.query(ForumPost)
                .options(selectinload(ForumPost.comments))
                .filter(ForumPost.id == post_id)
                .populate_existing()
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading post {post_id}: {str(e)}")
            raise RepositoryException(f"Failed to load post: {str(e)}")

    # Votes

    def get_vote(self, post_id: str, voter_email: str) -> Optional[ForumVote]:
        try:
            return (
                self.db.query(ForumVote)
                .filter(ForumVote.post_id == post_id, ForumVote.voter_email == voter_email)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading vote on {post_id}: {str(e)}")
            raise RepositoryException(f"Failed to load vote: {str(e)}")

    def add_vote(self, post_id: str, voter_email: str, vote_type: VoteType) -> ForumVote:
        """Insert a first vote; a concurrent duplicate raises ``IntegrityError``."""
        vote = ForumVote(post_id=post_id, voter_email=voter_email, vote_type=vote_type.value)
        self.db.add(vote)
        self.db.flush()
        return vote

    def recompute_counts(self, post_id: str) -> Tuple[int, int]:
        try:
            self.db.execute(
                update(ForumPost)
                .where(ForumPost.id == post_id)
                .values(
                    likes=_count_votes(post_id, VoteType.LIKE),
                    dislikes=_count_votes(post_id, VoteType.DISLIKE),
                )
                .execution_options(synchronize_session=False)
            )
            row = (
                self.db.query(ForumPost.likes, ForumPost.dislikes)
                .filter(ForumPost.id == post_id)
                .one()
            )
            return int(row[0]), int(row[1])
        except SQLAlchemyError as e:
            self.logger.error(f"Error recomputing votes for post {post_id}: {str(e)}")
            raise RepositoryException(f"Failed to recompute votes: {str(e)}")

    # Comments

    def add_comment(
        self, post_id: str, *, author_email: str, author_name: Optional[str], text: str
    ) -> ForumComment:
        try:
            comment = ForumComment(
                post_id=post_id, author_email=author_email, author_name=author_name, text=text
            )
            self.db.add(comment)
            self.db.flush()
            return comment
        except SQLAlchemyError as e:
            self.logger.error(f"Error adding comment to {post_id}: {str(e)}")
            raise RepositoryException(f"Failed to add comment: {str(e)}")

    def get_comment(self, post_id: str, comment_id: str) -> Optional[ForumComment]:
        try:
            return (
                self.db.query(ForumComment)
                .filter(ForumComment.id == comment_id, ForumComment.post_id == post_id)
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error loading comment {comment_id}: {str(e)}")
            raise RepositoryException(f"Failed to load comment: {str(e)}")

    def delete_comment(self, comment: ForumComment) -> None:
        try:
            self.db.delete(comment)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting comment {comment.id}: {str(e)}")
            raise RepositoryException(f"Failed to delete comment: {str(e)}")
