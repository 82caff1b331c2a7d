"""
Session model.

A Session is produced by an external authentication flow and passed
explicitly to every client action. The client never stores or mutates it.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Session(BaseModel):
    """
    Identity and bearer credential authorizing client actions.

    Accepts either snake_case field names or the camelCase keys returned
    by com.atproto.server.createSession, so a login response can be
    validated directly:

        >>> session = Session.model_validate(
        ...     {"did": "did:plc:abc", "accessJwt": "eyJ...", "handle": "alice.bsky.social"}
        ... )
        >>> session.authorization
        'Bearer eyJ...'
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    did: str = Field(
        ...,
        min_length=1,
        description="DID of the authenticated account",
    )
    access_jwt: str = Field(
        ...,
        min_length=1,
        alias="accessJwt",
        repr=False,
        description="Bearer token attached to every request",
    )
    handle: Optional[str] = Field(
        None,
        description="Handle of the authenticated account",
    )
    refresh_jwt: Optional[str] = Field(
        None,
        alias="refreshJwt",
        repr=False,
        description="Token used by the authentication flow to refresh the session",
    )

    @property
    def authorization(self) -> str:
        """Value of the Authorization header for this session."""
        return f"Bearer {self.access_jwt}"
