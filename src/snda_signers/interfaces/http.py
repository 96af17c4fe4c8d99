# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections.abc import AsyncIterable, Iterable, Iterator
from enum import Enum
from typing import Protocol, runtime_checkable


class FieldPosition(Enum):
    """Where a field travels in the message."""

    HEADER = 0

    TRAILER = 1
    """Sent after the body. Trailers are never signed."""


class Field(Protocol):
    """A named request field holding one or more values.

    ``name`` keeps the caller's spelling even though lookups ignore case.
    """

    name: str
    values: list[str]
    kind: FieldPosition = FieldPosition.HEADER

    def add(self, value: str) -> None:
        """Append one value."""
        ...

    def set(self, values: list[str]) -> None:
        """Replace every value."""
        ...

    def as_string(self, delimiter: str = ", ") -> str:
        """Values joined into one header line."""
        ...


class Fields(Protocol):
    """The fields of a request, looked up by case-insensitive name."""

    entries: dict[str, Field]

    def set_field(self, field: Field) -> None:
        """Add ``field``, replacing any field with the same name."""
        ...

    def __setitem__(self, name: str, field: Field) -> None: ...

    def __getitem__(self, name: str) -> Field: ...

    def __delitem__(self, name: str) -> None: ...

    def __contains__(self, name: str) -> bool: ...

    def __iter__(self) -> Iterator[Field]: ...

    def __len__(self) -> int: ...

    def get(self, name: str, default: Field | None = None) -> Field | None:
        """The field stored under ``name``, or ``default``."""
        ...

    def get_by_type(self, kind: FieldPosition) -> list[Field]:
        """Only the headers, or only the trailers."""
        ...


class Request(Protocol):
    """An outgoing storage API request."""

    method: str
    destination: URI
    fields: Fields
    body: AsyncIterable[bytes] | Iterable[bytes] | None


@runtime_checkable
class URI(Protocol):
    """Target of a :py:class:`Request`."""

    scheme: str
    host: str
    port: int | None
    path: str | None
    """Raw, percent-encoded path. Signed lower-cased."""

    query: str | None

    @property
    def netloc(self) -> str:
        """``host`` or ``host:port``."""
        ...

    def build(self) -> str:
        """The full URL string."""
        ...
