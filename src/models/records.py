"""
Record and request-body models for Bluesky write actions.

Record schemas are defined by the protocol lexicons; these models only
reproduce the subset the client submits. Every model serialises with
protocol (camelCase / $type) keys via to_wire(), omitting unset optional
fields.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# Record collection names
POST_COLLECTION = "app.bsky.feed.post"
REPOST_COLLECTION = "app.bsky.feed.repost"

# Embed $type discriminants
EMBED_IMAGES_TYPE = "app.bsky.embed.images"
EMBED_EXTERNAL_TYPE = "app.bsky.embed.external"


def current_timestamp() -> str:
    """
    Return the current instant as an ISO-8601 UTC string.

    Returns:
        Timestamp such as "2024-01-01T00:00:00.000Z"
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class WireModel(BaseModel):
    """Base for models sent to the remote service."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict:
        """Serialise to a JSON-ready dict using protocol field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StrongRef(WireModel):
    """Content-addressed reference to a remote record."""

    uri: str = Field(..., min_length=1, description="at:// uri of the record")
    cid: str = Field(..., min_length=1, description="CID of the record version")


class VoteDirection(str, Enum):
    """Vote direction; NONE cancels an existing vote."""

    UP = "up"
    DOWN = "down"
    NONE = "none"


class ImageRef(WireModel):
    """Reference to an uploaded image blob."""

    cid: str
    mime_type: str = Field(..., alias="mimeType")


class Image(WireModel):
    """Single image entry of an images embed."""

    image: ImageRef
    alt: str = ""


class ExternalLink(WireModel):
    """Link card shown by an external embed."""

    uri: str
    title: str = ""
    description: str = ""


class EmbedImages(WireModel):
    """Embed holding an ordered list of images."""

    type: Literal["app.bsky.embed.images"] = Field(EMBED_IMAGES_TYPE, alias="$type")
    images: list[Image]


class EmbedExternal(WireModel):
    """Embed holding an external link card."""

    type: Literal["app.bsky.embed.external"] = Field(EMBED_EXTERNAL_TYPE, alias="$type")
    external: ExternalLink


# Members are told apart by their $type literal
Embed = Union[EmbedImages, EmbedExternal]


class ReplyRef(WireModel):
    """Thread position of a reply: the thread root and the direct parent."""

    root: StrongRef
    parent: StrongRef


class FeedPostRecord(WireModel):
    """An app.bsky.feed.post record."""

    type: Literal["app.bsky.feed.post"] = Field(POST_COLLECTION, alias="$type")
    text: str
    created_at: str = Field(..., alias="createdAt")
    reply: Optional[ReplyRef] = None
    embed: Optional[Embed] = None

    def created_at_as_datetime(self) -> datetime:
        """Parse createdAt into an aware datetime."""
        return datetime.fromisoformat(self.created_at.replace("Z", "+00:00"))


class RepostRecord(WireModel):
    """An app.bsky.feed.repost record."""

    type: Literal["app.bsky.feed.repost"] = Field(REPOST_COLLECTION, alias="$type")
    subject: StrongRef
    created_at: str = Field(..., alias="createdAt")


class CreateRecordInput(WireModel):
    """
    Body of com.atproto.repo.createRecord.

    Use one of the concrete subclasses; each pins the collection name to
    the record variant it carries, so the two can never disagree.
    """

    did: str
    validate_record: Optional[bool] = Field(None, alias="validate")


class CreatePostInput(CreateRecordInput):
    """createRecord body for a post or reply."""

    collection: Literal["app.bsky.feed.post"] = POST_COLLECTION
    record: FeedPostRecord


class CreateRepostInput(CreateRecordInput):
    """createRecord body for a repost."""

    collection: Literal["app.bsky.feed.repost"] = REPOST_COLLECTION
    record: RepostRecord


class DeleteRecordInput(WireModel):
    """Body of com.atproto.repo.deleteRecord."""

    did: str
    collection: Literal["app.bsky.feed.post", "app.bsky.feed.repost"]
    rkey: str = Field(..., min_length=1)


class SetVoteInput(WireModel):
    """Body of app.bsky.feed.setVote."""

    subject: StrongRef
    direction: VoteDirection
