# fitflow/services/forum_service.py
"""
Community forum: posts, comments and the like/dislike vote tally.

Vote transitions per (post, voter):

    current    input     next
    -------    -------   --------
    none       like      liked
    none       dislike   disliked
    none       null      rejected (nothing to toggle)
    liked      like      none       (toggle off)
    liked      dislike   disliked
    disliked   dislike   none       (toggle off)
    disliked   like      liked
    any vote   null      none

Vote rows are the source of truth; after every change the post's counters
are recomputed from them in the same transaction.
"""

from dataclasses import dataclass
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.enums import VoteType
from ..core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..models.forum import ForumComment, ForumPost
from ..principal import Principal
from ..repositories.forum_repository import ForumRepository
from .base import BaseService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoteTally:
    likes: int
    dislikes: int
    user_vote: Optional[VoteType]


class ForumService(BaseService):
    def __init__(self, db: Session, forum_repository: Optional[ForumRepository] = None):
        super().__init__(db)
        self.repository = forum_repository or ForumRepository(db)

    # Posts

    @BaseService.measure_operation("create_post")
    def create_post(
        self, principal: Principal, *, title: str, content: str, image_url: Optional[str] = None
    ) -> ForumPost:
        with self.transaction():
            post = self.repository.create(
                author_email=principal.email,
                author_name=principal.display_name,
                author_role=principal.role.value,
                title=title,
                content=content,
                image_url=image_url,
                likes=0,
                dislikes=0,
            )
        self.log_operation("create_post", post_id=post.id, author=principal.email)
        return post

    def list_posts(self, page: int, limit: int) -> Tuple[List[ForumPost], int]:
        skip = (max(page, 1) - 1) * limit
        return self.repository.list_page(skip=skip, limit=limit)

    def get_post(self, post_id: str) -> ForumPost:
        post = self.repository.get_with_comments(post_id)
        if post is None:
            raise NotFoundException("Post not found", code="POST_NOT_FOUND")
        return post

    @BaseService.measure_operation("delete_post")
    def delete_post(self, principal: Principal, post_id: str) -> None:
        with self.transaction():
            post = self.repository.get_by_id(post_id)
            if post is None:
                raise NotFoundException("Post not found", code="POST_NOT_FOUND")
            if post.author_email != principal.email and not principal.is_admin:
                raise ForbiddenException("You can only delete your own posts")
            self.repository.delete(post_id)
        self.log_operation("delete_post", post_id=post_id)

    # Votes

    @BaseService.measure_operation("cast_vote")
    def cast_vote(
        self, principal: Principal, post_id: str, vote_type: Optional[VoteType]
    ) -> VoteTally:
        try:
            with self.transaction():
                if self.repository.get_by_id(post_id) is None:
                    raise NotFoundException("Post not found", code="POST_NOT_FOUND")

                current = self.repository.get_vote(post_id, principal.email)
                if current is None:
                    if vote_type is None:
                        raise ValidationException(
                            "There is no vote to remove", code="NOTHING_TO_TOGGLE"
                        )
                    self.repository.add_vote(post_id, principal.email, vote_type)
                    user_vote: Optional[VoteType] = vote_type
                elif vote_type is None or current.vote_type == vote_type.value:
                    self.db.delete(current)
                    self.db.flush()
                    user_vote = None
                else:
                    current.vote_type = vote_type.value
                    self.db.flush()
                    user_vote = vote_type

                likes, dislikes = self.repository.recompute_counts(post_id)
        except IntegrityError:
            raise ConflictException(
                "Another vote from you on this post is in progress", code="VOTE_CONFLICT"
            )

        return VoteTally(likes=likes, dislikes=dislikes, user_vote=user_vote)

    # Comments

    @BaseService.measure_operation("add_comment")
    def add_comment(self, principal: Principal, post_id: str, text: str) -> ForumComment:
        text = (text or "").strip()
        if not text:
            raise ValidationException("Comment text is required", code="EMPTY_COMMENT")

        with self.transaction():
            if self.repository.get_by_id(post_id) is None:
                raise NotFoundException("Post not found", code="POST_NOT_FOUND")
            comment = self.repository.add_comment(
                post_id,
                author_email=principal.email,
                author_name=principal.display_name,
                text=text,
            )
        return comment

    @BaseService.measure_operation("delete_comment")
    def delete_comment(self, principal: Principal, post_id: str, comment_id: str) -> None:
        with self.transaction():
            comment = self.repository.get_comment(post_id, comment_id)
            if comment is None:
                raise NotFoundException("Comment not found", code="COMMENT_NOT_FOUND")
            if comment.author_email != principal.email and not principal.is_admin:
                raise ForbiddenException("You can only delete your own comments")
            self.repository.delete_comment(comment)
