# fitflow/schemas/community.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.constants import MAX_COMMENT_LENGTH
from ..core.enums import UserRole, VoteType
from ._strict_base import ORMResponseModel, StrictRequestModel


class PostCreateRequest(StrictRequestModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1)
    image_url: Optional[str] = Field(None, max_length=500)


class VoteRequest(StrictRequestModel):
    post_id: str = Field(..., min_length=1)
    vote_type: Optional[VoteType] = Field(
        ..., description="'like', 'dislike', or null to clear the current vote"
    )


class VoteResponse(BaseModel):
    likes: int
    dislikes: int
    user_vote: Optional[VoteType] = None


class CommentCreateRequest(StrictRequestModel):
    text: str = Field(..., min_length=1, max_length=MAX_COMMENT_LENGTH)


class CommentResponse(ORMResponseModel):
    id: str
    post_id: str
    author_email: str
    author_name: Optional[str] = None
    text: str
    created_at: datetime


class PostResponse(ORMResponseModel):
    id: str
    author_email: str
    author_name: Optional[str] = None
    author_role: UserRole
    title: str
    content: str
    image_url: Optional[str] = None
    likes: int
    dislikes: int
    created_at: datetime


class PostDetailResponse(PostResponse):
    comments: List[CommentResponse] = Field(default_factory=list)


class PostPageResponse(BaseModel):
    posts: List[PostResponse]
    total: int
    page: int
    limit: int
    total_pages: int
