"""
Unit tests for XRPC response models.
"""

import pytest
from pydantic import ValidationError

from src.models.responses import (
    CreateRecordResponse,
    FeedViewPost,
    SetVoteResponse,
    Timeline,
    UploadBlobOutput,
)


class TestTimeline:
    """Test timeline parsing."""

    def test_parse_with_unknown_fields(self):
        """Test unknown fields are preserved."""
        timeline = Timeline.model_validate(
            {
                "cursor": "next",
                "feed": [
                    {
                        "post": {
                            "uri": "at://did:plc:abc/app.bsky.feed.post/1",
                            "cid": "bafy1",
                            "author": {"did": "did:plc:abc", "handle": "alice.bsky.social"},
                            "record": {"text": "hello"},
                            "indexedAt": "2024-01-01T00:00:00Z",
                        },
                        "reason": {"$type": "app.bsky.feed.feedViewPost#reasonRepost"},
                    }
                ],
            }
        )

        entry = timeline.feed[0]
        assert isinstance(entry, FeedViewPost)
        assert entry.post.uri == "at://did:plc:abc/app.bsky.feed.post/1"
        assert entry.post.record == {"text": "hello"}
        assert entry.post.model_extra["indexedAt"] == "2024-01-01T00:00:00Z"

    def test_empty_timeline(self):
        """Test a body without cursor or feed."""
        timeline = Timeline.model_validate({})
        assert timeline.cursor is None
        assert timeline.feed == []

    def test_post_requires_uri(self):
        """Test feed entries must carry a post uri."""
        with pytest.raises(ValidationError):
            FeedViewPost.model_validate({"post": {"cid": "bafy1"}})


class TestWriteResponses:
    """Test write-action responses."""

    def test_set_vote_response(self):
        """Test both vote fields are optional."""
        assert SetVoteResponse.model_validate({}).upvote is None

    def test_create_record_response(self):
        """Test uri and cid are required."""
        response = CreateRecordResponse.model_validate({"uri": "at://x/y/z", "cid": "c"})
        assert response.cid == "c"
        with pytest.raises(ValidationError):
            CreateRecordResponse.model_validate({"uri": "at://x/y/z"})

    def test_upload_blob_output(self):
        """Test the blob cid is parsed."""
        assert UploadBlobOutput.model_validate({"cid": "bafyblob"}).cid == "bafyblob"
