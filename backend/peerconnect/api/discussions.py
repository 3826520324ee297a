"""Discussion forum routes: visibility-scoped feed, posts, comments, likes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from peerconnect.api.deps import get_discussion_service
from peerconnect.api.schemas import CommentRequest, CreatePostRequest
from peerconnect.domain.discussions.feed_query import parse_bool
from peerconnect.domain.discussions.service import DiscussionService
from peerconnect.infra.auth import AuthenticatedUser, get_current_user

router = APIRouter(prefix="/discussions", tags=["discussions"])


@router.get("/posts")
async def list_posts_endpoint(
	page: Optional[str] = Query(default=None),
	limit: Optional[str] = Query(default=None),
	category: Optional[str] = Query(default=None),
	search: Optional[str] = Query(default=None),
	sort: Optional[str] = Query(default=None),
	include_general: Optional[str] = Query(default="true"),
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	posts = await service.list_posts(
		auth_user.id,
		include_general=parse_bool(include_general, default=True),
		category=category,
		search=search,
		sort=sort,
		page=page,
		limit=limit,
	)
	return {"success": True, "posts": [post.model_dump(mode="json") for post in posts]}


@router.get("/posts/{post_id}")
async def get_post_endpoint(
	post_id: int,
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	post, comments = await service.get_post(post_id)
	return {
		"success": True,
		"post": post.model_dump(mode="json"),
		"comments": [comment.model_dump(mode="json") for comment in comments],
	}


@router.post("/posts")
async def create_post_endpoint(
	payload: CreatePostRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	post = await service.create_post(
		auth_user.id,
		title=payload.title,
		content=payload.content,
		category=payload.category,
		module_id=payload.module_id,
	)
	return {"success": True, "post": post.model_dump(mode="json")}


@router.post("/posts/{post_id}/comments")
async def add_comment_endpoint(
	post_id: int,
	payload: CommentRequest,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	comment = await service.add_comment(post_id, auth_user.id, content=payload.content)
	return {"success": True, "comment": comment.model_dump(mode="json")}


@router.post("/posts/{post_id}/like")
async def toggle_like_endpoint(
	post_id: int,
	auth_user: AuthenticatedUser = Depends(get_current_user),
	service: DiscussionService = Depends(get_discussion_service),
) -> dict:
	result = await service.toggle_like(post_id, auth_user.id)
	return {"success": True, "liked": result.liked, "likes": result.likes}


@router.get("/trending")
async def trending_endpoint(service: DiscussionService = Depends(get_discussion_service)) -> dict:
	trending = await service.trending()
	return {"success": True, "trending": [post.model_dump(mode="json") for post in trending]}


@router.get("/tags")
async def tags_endpoint(service: DiscussionService = Depends(get_discussion_service)) -> dict:
	tags = await service.tags()
	return {"success": True, "tags": [tag.model_dump() for tag in tags]}


@router.get("/stats")
async def stats_endpoint(service: DiscussionService = Depends(get_discussion_service)) -> dict:
	stats = await service.stats()
	return {"success": True, "stats": stats.model_dump()}
