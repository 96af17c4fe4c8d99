# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable


@runtime_checkable
class Identity(Protocol):
    """An entity available to the client representing who the user is."""

    expiration: datetime | None = None
    """The expiration time of the identity.

    If time zone is provided, it is updated to UTC. The value must always be in UTC.
    """

    @property
    def is_expired(self) -> bool:
        """Whether the identity is expired."""
        if self.expiration is None:
            return False
        return datetime.now(tz=UTC) >= self.expiration


@runtime_checkable
class SNDACredentialsIdentity(Identity, Protocol):
    """GrandCloud storage credentials identity."""

    access_key_id: str
    """The public identifier placed in the ``Authorization`` header."""

    secret_access_key: str | None
    """The secret used as the HMAC key. It is never transmitted."""


I = TypeVar("I", bound=Identity)
IP = TypeVar("IP", bound=Mapping[str, Any])


class IdentityResolver(Protocol, Generic[I, IP]):
    """Used to load a user's `Identity` from a given source."""

    async def get_identity(self, *, properties: IP) -> I:
        """Load the user's identity from this resolver.

        :param properties: Properties used to help determine the identity to return.
        """
        ...
