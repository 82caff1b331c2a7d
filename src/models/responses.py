"""
Pydantic response models for Bluesky XRPC calls.

The client treats these as opaque values returned to the caller. Only
the fields it needs are declared; everything else the service sends is
kept as extra attributes.
"""
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class XrpcResponse(BaseModel):
    """Base for response bodies; unknown fields are preserved."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class PostView(XrpcResponse):
    """A hydrated post as returned in feeds."""

    uri: str = Field(..., description="at:// uri of the post record")
    cid: str = Field(..., description="CID of the post record")
    author: Optional[dict[str, Any]] = None
    record: Optional[dict[str, Any]] = None


class FeedViewPost(XrpcResponse):
    """A single timeline entry."""

    post: PostView
    reply: Optional[dict[str, Any]] = None
    reason: Optional[dict[str, Any]] = None


class Timeline(XrpcResponse):
    """Output of app.bsky.feed.getTimeline."""

    cursor: Optional[str] = Field(
        None,
        description="Opaque pagination cursor for the next page",
    )
    feed: list[FeedViewPost] = Field(default_factory=list)


class SetVoteResponse(XrpcResponse):
    """Output of app.bsky.feed.setVote."""

    upvote: Optional[str] = Field(None, description="uri of the upvote record, if any")
    downvote: Optional[str] = Field(None, description="uri of the downvote record, if any")


class CreateRecordResponse(XrpcResponse):
    """Output of com.atproto.repo.createRecord."""

    uri: str
    cid: str


class UploadBlobOutput(XrpcResponse):
    """Output of com.atproto.blob.upload."""

    cid: str
