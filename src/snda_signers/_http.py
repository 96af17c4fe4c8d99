# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from collections import Counter
from collections.abc import AsyncIterable, Iterable, Iterator
from copy import deepcopy
from dataclasses import dataclass
from urllib.parse import urlunparse

import snda_signers.interfaces.http as interfaces_http

CONTENT_TYPE_HEADER = "Content-Type"


def _lookup_key(name: str) -> str:
    return name.lower()


class Field(interfaces_http.Field):
    """One request header (or trailer) and all of its values.

    The name keeps the caller's spelling. Lookups through :py:class:`Fields` ignore
    case, but the signer reads the spelling back for ``Range`` and for ordering the
    ``x-snda-*`` block.
    """

    def __init__(
        self,
        *,
        name: str,
        values: Iterable[str] | None = None,
        kind: interfaces_http.FieldPosition = interfaces_http.FieldPosition.HEADER,
    ):
        self.name = name
        self.values: list[str] = [] if values is None else list(values)
        self.kind = kind

    def add(self, value: str) -> None:
        self.values.append(value)

    def set(self, values: list[str]) -> None:
        self.values = values

    def as_string(self, delimiter: str = ", ") -> str:
        """Join the values for transmission on a single header line."""
        return delimiter.join(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return False
        return (self.name, self.kind, self.values) == (
            other.name,
            other.kind,
            other.values,
        )

    def __repr__(self) -> str:
        return f"Field(name={self.name!r}, values={self.values!r}, kind={self.kind!r})"


class Fields(interfaces_http.Fields):
    """Request fields keyed by case-insensitive name.

    Setting a field whose name differs only in case from an existing one replaces
    it, so a request never carries two spellings of the same header.
    """

    def __init__(self, initial: Iterable[interfaces_http.Field] | None = None):
        fields = [] if initial is None else list(initial)
        counts = Counter(_lookup_key(field.name) for field in fields)
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        if duplicates:
            raise ValueError(
                "Initial fields must have unique case-insensitive names; "
                f"repeated: {', '.join(duplicates)}."
            )
        self.entries: dict[str, interfaces_http.Field] = {
            _lookup_key(field.name): field for field in fields
        }

    def set_field(self, field: interfaces_http.Field) -> None:
        self[field.name] = field

    def __setitem__(self, name: str, field: interfaces_http.Field) -> None:
        key = _lookup_key(name)
        if key != _lookup_key(field.name):
            raise ValueError(
                f"Key {name!r} does not name the supplied field {field.name!r}."
            )
        self.entries[key] = field

    def get(
        self, name: str, default: interfaces_http.Field | None = None
    ) -> interfaces_http.Field | None:
        return self.entries.get(_lookup_key(name), default)

    def __getitem__(self, name: str) -> interfaces_http.Field:
        return self.entries[_lookup_key(name)]

    def __delitem__(self, name: str) -> None:
        del self.entries[_lookup_key(name)]

    def get_by_type(
        self, kind: interfaces_http.FieldPosition
    ) -> list[interfaces_http.Field]:
        """All fields of one kind, in insertion order."""
        return [field for field in self if field.kind is kind]

    def __contains__(self, name: str) -> bool:
        return _lookup_key(name) in self.entries

    def __iter__(self) -> Iterator[interfaces_http.Field]:
        return iter(self.entries.values())

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        """Same fields in the same order."""
        if not isinstance(other, Fields):
            return False
        return list(self.entries.items()) == list(other.entries.items())

    def __repr__(self) -> str:
        return f"Fields({list(self.entries.values())!r})"


@dataclass(kw_only=True, frozen=True)
class URI(interfaces_http.URI):
    """Where a :py:class:`SNDARequest` is sent.

    ``path`` stays percent-encoded; the signer lower-cases it as given.
    """

    scheme: str = "https"
    host: str
    port: int | None = None
    path: str | None = None
    query: str | None = None

    @property
    def netloc(self) -> str:
        return self.host if self.port is None else f"{self.host}:{self.port}"

    def build(self) -> str:
        return urlunparse(
            (self.scheme, self.netloc, self.path or "", "", self.query or "", "")
        )


class SNDARequest(interfaces_http.Request):
    def __init__(
        self,
        *,
        destination: URI,
        method: str,
        body: AsyncIterable[bytes] | Iterable[bytes] | None,
        fields: Fields,
    ):
        self.destination = destination
        self.method = method
        self.body = body
        self.fields = fields

    @property
    def content_type(self) -> str | None:
        """First ``Content-Type`` value, or None when the request has no body."""
        if self.body is None:
            return None
        field = self.fields.get(CONTENT_TYPE_HEADER)
        if field is None or not field.values:
            return None
        return field.values[0]

    def __deepcopy__(self, memo: dict[int, SNDARequest] | None = None) -> SNDARequest:
        memo = {} if memo is None else memo
        if id(self) not in memo:
            # URI is frozen and the body may be a one-shot stream, so both are
            # shared; only the fields are copied.
            memo[id(self)] = type(self)(
                destination=self.destination,
                method=self.method,
                body=self.body,
                fields=deepcopy(self.fields, memo),
            )
        return memo[id(self)]

    def __repr__(self) -> str:
        return (
            f"SNDARequest(method={self.method!r}, "
            f"destination={self.destination.build()!r}, fields={self.fields!r})"
        )
