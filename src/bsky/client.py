"""
Authenticated action client for Bluesky.

Each action builds a request body from its arguments and the caller's
Session, sends it through the transport, and either returns the typed
result or raises AuthExpiredError / RequestFailedError via the error
normalizer. The client holds no per-call state, so one instance can
serve any number of concurrent actions and sessions.
"""

import time
from typing import Any, Awaitable, Optional

import structlog

from src.models.records import (
    POST_COLLECTION,
    REPOST_COLLECTION,
    CreatePostInput,
    CreateRepostInput,
    DeleteRecordInput,
    EmbedImages,
    FeedPostRecord,
    Image,
    ImageRef,
    ReplyRef,
    RepostRecord,
    SetVoteInput,
    StrongRef,
    VoteDirection,
    current_timestamp,
)
from src.models.responses import (
    CreateRecordResponse,
    FeedViewPost,
    SetVoteResponse,
    Timeline,
    UploadBlobOutput,
)
from src.models.session import Session
from src.utils.logger import log_action_execution

from .exceptions import InvalidRecordUriError
from .normalizer import raise_for_failure
from .record_keys import record_key_from_uri
from .transport import Success, Transport, TransportResult


logger = structlog.get_logger(__name__)

# XRPC method ids
GET_TIMELINE = "app.bsky.feed.getTimeline"
SET_VOTE = "app.bsky.feed.setVote"
CREATE_RECORD = "com.atproto.repo.createRecord"
DELETE_RECORD = "com.atproto.repo.deleteRecord"
UPLOAD_BLOB = "com.atproto.blob.upload"


def _image_embed(
    image_cid: Optional[str],
    image_mime_type: Optional[str],
) -> Optional[EmbedImages]:
    """Build a single-image embed, or None unless both fields are given."""
    if image_cid is None or image_mime_type is None:
        return None

    image = Image(image=ImageRef(cid=image_cid, mime_type=image_mime_type), alt="")
    return EmbedImages(images=[image])


class BskyActionClient:
    """
    Client for authenticated Bluesky actions.

    Attributes:
        transport: Request executor returning TransportResults

    Example:
        >>> async with XrpcTransport() as transport:
        ...     client = BskyActionClient(transport)
        ...     timeline = await client.get_timeline(session)
        ...     await client.upvote(session, StrongRef(uri=..., cid=...))
    """

    def __init__(self, transport: Transport) -> None:
        """
        Initialize BskyActionClient.

        Args:
            transport: Transport used for every request
        """
        self.transport = transport

    async def _run_authenticated(
        self,
        operation: str,
        request: Awaitable[TransportResult],
    ) -> Any:
        """
        Await a transport request and unwrap or normalize its result.

        This is the single place where actions touch a TransportResult.

        Args:
            operation: Action name used in log entries
            request: Pending transport call

        Returns:
            The success value

        Raises:
            AuthExpiredError: If the session credential was rejected
            RequestFailedError: For any other failure
        """
        start = time.perf_counter()
        result = await request
        duration_ms = (time.perf_counter() - start) * 1000

        if isinstance(result, Success):
            log_action_execution(action=operation, duration_ms=duration_ms)
            return result.value

        log_action_execution(
            action=operation,
            duration_ms=duration_ms,
            error=type(result).__name__,
        )
        raise_for_failure(result, operation)

    @staticmethod
    def _record_key(operation: str, uri: str) -> str:
        """Derive a record key, logging uris that do not yield one."""
        try:
            return record_key_from_uri(uri)
        except InvalidRecordUriError as e:
            logger.warning(
                "invalid_record_uri",
                operation=operation,
                uri=uri,
                error_kind=type(e).__name__,
            )
            raise

    async def get_timeline(self, session: Session, before: Optional[str] = None) -> Timeline:
        """
        Fetch the home timeline.

        Args:
            session: Authenticated session
            before: Opaque pagination cursor; omitted from the request when None

        Returns:
            Timeline page
        """
        logger.debug("get_timeline", before=before)

        return await self._run_authenticated(
            "get_timeline",
            self.transport.query(
                GET_TIMELINE,
                authorization=session.authorization,
                params={"before": before},
                response_model=Timeline,
            ),
        )

    async def upvote(self, session: Session, subject: StrongRef) -> SetVoteResponse:
        """
        Upvote a post.

        Args:
            session: Authenticated session
            subject: Reference to the post

        Returns:
            SetVoteResponse
        """
        logger.debug("upvote", uri=subject.uri, cid=subject.cid)

        return await self._set_vote("upvote", session, subject, VoteDirection.UP)

    async def cancel_vote(self, session: Session, subject: StrongRef) -> None:
        """
        Remove the session's vote on a post.

        Args:
            session: Authenticated session
            subject: Reference to the post
        """
        logger.debug("cancel_vote", uri=subject.uri, cid=subject.cid)

        await self._set_vote("cancel_vote", session, subject, VoteDirection.NONE)

    async def _set_vote(
        self,
        operation: str,
        session: Session,
        subject: StrongRef,
        direction: VoteDirection,
    ) -> SetVoteResponse:
        body = SetVoteInput(subject=subject, direction=direction)
        return await self._run_authenticated(
            operation,
            self.transport.procedure(
                SET_VOTE,
                authorization=session.authorization,
                json=body.to_wire(),
                response_model=SetVoteResponse,
            ),
        )

    async def repost(self, session: Session, subject: StrongRef) -> CreateRecordResponse:
        """
        Repost a post.

        Args:
            session: Authenticated session
            subject: Reference to the post

        Returns:
            CreateRecordResponse with the uri of the new repost record
        """
        logger.debug("repost", uri=subject.uri, cid=subject.cid)

        record = RepostRecord(subject=subject, created_at=current_timestamp())
        body = CreateRepostInput(did=session.did, record=record)

        return await self._run_authenticated(
            "repost",
            self.transport.procedure(
                CREATE_RECORD,
                authorization=session.authorization,
                json=body.to_wire(),
                response_model=CreateRecordResponse,
            ),
        )

    async def cancel_repost(self, session: Session, uri: str) -> None:
        """
        Delete a repost record.

        Args:
            session: Authenticated session
            uri: uri of the repost record

        Raises:
            InvalidRecordUriError: If no record key can be derived from uri
        """
        logger.debug("cancel_repost", uri=uri)

        rkey = self._record_key("cancel_repost", uri)
        await self._delete_record("cancel_repost", session, REPOST_COLLECTION, rkey)

    async def create_post(
        self,
        session: Session,
        content: str,
        image_cid: Optional[str] = None,
        image_mime_type: Optional[str] = None,
    ) -> None:
        """
        Create a post, optionally with one uploaded image.

        Args:
            session: Authenticated session
            content: Post text
            image_cid: CID of an uploaded image blob
            image_mime_type: MIME type of that image
        """
        logger.debug("create_post", content=content)

        record = FeedPostRecord(
            text=content,
            created_at=current_timestamp(),
            embed=_image_embed(image_cid, image_mime_type),
        )
        await self._create_post_record("create_post", session, record)

    async def create_reply(
        self,
        session: Session,
        content: str,
        to: ReplyRef,
        image_cid: Optional[str] = None,
        image_mime_type: Optional[str] = None,
    ) -> None:
        """
        Reply to a post, optionally with one uploaded image.

        Args:
            session: Authenticated session
            content: Reply text
            to: Root and parent of the thread being replied to
            image_cid: CID of an uploaded image blob
            image_mime_type: MIME type of that image
        """
        logger.debug("create_reply", content=content, root=to.root.uri, parent=to.parent.uri)

        record = FeedPostRecord(
            text=content,
            created_at=current_timestamp(),
            reply=to,
            embed=_image_embed(image_cid, image_mime_type),
        )
        await self._create_post_record("create_reply", session, record)

    async def _create_post_record(
        self,
        operation: str,
        session: Session,
        record: FeedPostRecord,
    ) -> None:
        body = CreatePostInput(did=session.did, record=record)
        await self._run_authenticated(
            operation,
            self.transport.procedure(
                CREATE_RECORD,
                authorization=session.authorization,
                json=body.to_wire(),
            ),
        )

    async def delete_post(self, session: Session, feed_view_post: FeedViewPost) -> None:
        """
        Delete one of the session's posts.

        Args:
            session: Authenticated session
            feed_view_post: Timeline entry of the post to delete

        Raises:
            InvalidRecordUriError: If no record key can be derived from the post uri
        """
        uri = feed_view_post.post.uri
        logger.debug("delete_post", uri=uri)

        rkey = self._record_key("delete_post", uri)
        await self._delete_record("delete_post", session, POST_COLLECTION, rkey)

    async def _delete_record(
        self,
        operation: str,
        session: Session,
        collection: str,
        rkey: str,
    ) -> None:
        body = DeleteRecordInput(did=session.did, collection=collection, rkey=rkey)
        await self._run_authenticated(
            operation,
            self.transport.procedure(
                DELETE_RECORD,
                authorization=session.authorization,
                json=body.to_wire(),
            ),
        )

    async def upload_image(
        self,
        session: Session,
        image: bytes,
        mime_type: str,
    ) -> UploadBlobOutput:
        """
        Upload an image blob for later embedding in a post.

        Args:
            session: Authenticated session
            image: Raw image bytes
            mime_type: MIME type sent as the request Content-Type

        Returns:
            UploadBlobOutput with the blob's CID
        """
        logger.debug("upload_image", mime_type=mime_type, size=len(image))

        return await self._run_authenticated(
            "upload_image",
            self.transport.procedure(
                UPLOAD_BLOB,
                authorization=session.authorization,
                content=image,
                content_type=mime_type,
                response_model=UploadBlobOutput,
            ),
        )
