# fitflow/routes/community.py
"""
Community forum routes.

Endpoints:
    POST /community/posts - New post (trainer or admin)
    GET /community/posts - Page of posts, newest first
    GET /community/posts/{post_id} - Post with comments
    DELETE /community/posts/{post_id} - Remove a post (author or admin)
    POST /community/vote - Like, dislike, or clear a vote
    POST /community/posts/{post_id}/comments - Comment on a post
    DELETE /community/posts/{post_id}/comments/{comment_id} - Remove a comment
"""

import math

from fastapi import APIRouter, Depends, Query, status

from ..api.dependencies import get_current_principal, get_forum_service, require_trainer_or_admin
from ..core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..principal import Principal
from ..schemas.common import MessageResponse
from ..schemas.community import (
    CommentCreateRequest,
    CommentResponse,
    PostCreateRequest,
    PostDetailResponse,
    PostPageResponse,
    PostResponse,
    VoteRequest,
    VoteResponse,
)
from ..services.forum_service import ForumService

router = APIRouter(prefix="/community", tags=["community"])


@router.post("/posts", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    payload: PostCreateRequest,
    principal: Principal = Depends(require_trainer_or_admin),
    service: ForumService = Depends(get_forum_service),
) -> PostResponse:
    post = service.create_post(
        principal, title=payload.title, content=payload.content, image_url=payload.image_url
    )
    return PostResponse.model_validate(post)


@router.get("/posts", response_model=PostPageResponse)
def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    service: ForumService = Depends(get_forum_service),
) -> PostPageResponse:
    posts, total = service.list_posts(page, limit)
    return PostPageResponse(
        posts=[PostResponse.model_validate(post) for post in posts],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if total else 0,
    )


@router.get("/posts/{post_id}", response_model=PostDetailResponse)
def get_post(post_id: str, service: ForumService = Depends(get_forum_service)) -> PostDetailResponse:
    return PostDetailResponse.model_validate(service.get_post(post_id))


@router.delete("/posts/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ForumService = Depends(get_forum_service),
) -> MessageResponse:
    service.delete_post(principal, post_id)
    return MessageResponse(message="Post deleted")


@router.post("/vote", response_model=VoteResponse)
def vote(
    payload: VoteRequest,
    principal: Principal = Depends(get_current_principal),
    service: ForumService = Depends(get_forum_service),
) -> VoteResponse:
    """
    Toggle the caller's vote on a post.

    Voting the same way twice clears the vote, voting the other way switches
    it, and ``vote_type: null`` clears it explicitly.
    """
    tally = service.cast_vote(principal, payload.post_id, payload.vote_type)
    return VoteResponse(likes=tally.likes, dislikes=tally.dislikes, user_vote=tally.user_vote)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_comment(
    post_id: str,
    payload: CommentCreateRequest,
    principal: Principal = Depends(get_current_principal),
    service: ForumService = Depends(get_forum_service),
) -> CommentResponse:
    return CommentResponse.model_validate(service.add_comment(principal, post_id, payload.text))


@router.delete("/posts/{post_id}/comments/{comment_id}", response_model=MessageResponse)
def delete_comment(
    post_id: str,
    comment_id: str,
    principal: Principal = Depends(get_current_principal),
    service: ForumService = Depends(get_forum_service),
) -> MessageResponse:
    service.delete_comment(principal, post_id, comment_id)
    return MessageResponse(message="Comment deleted")
