# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import base64
import datetime
import hmac
import logging
import re
from collections.abc import Awaitable, Callable
from copy import deepcopy
from email.utils import format_datetime
from hashlib import sha1
from inspect import isawaitable
from typing import Any, TypeAlias, TypedDict

from ._http import Field, SNDARequest
from ._identity import SNDACredentialIdentity
from .config import SignerConfig
from .exceptions import (
    MissingCredentialError,
    MissingExpectedParameterException,
    SigningError,
)
from .interfaces.http import FieldPosition
from .interfaces.identity import IdentityResolver
from .interfaces.identity import SNDACredentialsIdentity as _SNDACredentialsIdentity
from .interfaces.wire import SignatureWire
from .wire import LoggingSignatureWire

logger = logging.getLogger(__name__)

SNDA_AUTH_SCHEME: str = "SNDA"
SNDA_HEADER_PREFIX: str = "x-snda-"
SNDA_DATE_HEADER: str = "x-snda-date"
SNDA_SIGNATURE_HEADER: str = "x-snda-signature"
AUTHORIZATION_HEADER: str = "Authorization"
DATE_HEADER: str = "Date"
RANGE_HEADER: str = "Range"

_NEWLINE_RE = re.compile(r"\r?\n")

Clock: TypeAlias = Callable[[], datetime.datetime]
AsyncClock: TypeAlias = Callable[[], datetime.datetime | Awaitable[datetime.datetime]]


class SNDASigningProperties(TypedDict, total=False):
    date: str


def format_http_date(value: datetime.datetime) -> str:
    """Format a datetime as an RFC 1123 HTTP date, e.g.
    ``Tue, 01 Jan 2013 00:00:00 GMT``.

    Naive datetimes are assumed to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=datetime.UTC)
    return format_datetime(value.astimezone(datetime.UTC), usegmt=True)


def _utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.UTC)


def _default_signature_wire(config: SignerConfig | None) -> SignatureWire:
    if config is None:
        config = SignerConfig()
    return LoggingSignatureWire(enabled=config.wire_logging_enabled)


class SNDASigner:
    """Request signer for the GrandCloud storage HMAC-SHA1 scheme.

    The signer keeps no per-request state and may be shared across threads.
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        signature_wire: SignatureWire | None = None,
        config: SignerConfig | None = None,
    ) -> None:
        """
        :param clock: Returns the current time used for the ``Date`` header.
            Defaults to the system clock in UTC.
        :param signature_wire: Sink for the string to sign and signature. When
            omitted, a :py:class:`LoggingSignatureWire` is created that is enabled
            according to ``config``.
        :param config: Signer settings. Resolved from the environment if omitted.
        """
        self._clock = clock or _utc_now
        if signature_wire is None:
            signature_wire = _default_signature_wire(config)
        self._signature_wire = signature_wire

    def sign(
        self,
        *,
        request: SNDARequest,
        identity: SNDACredentialIdentity,
        signing_properties: SNDASigningProperties | None = None,
    ) -> SNDARequest:
        """Generate and apply a signature to a copy of the supplied request.

        :param request: An SNDARequest to sign prior to sending to the service.
        :param identity: The credentials to sign with. They are read once per call.
        :param signing_properties: Optional overrides, such as a preformatted
            ``date``.
        """
        self._validate_identity(identity=identity)
        date = self._resolve_date(signing_properties=signing_properties)

        new_request = self._generate_new_request(request=request)
        self._apply_date_fields(request=new_request, date=date)

        string_to_sign = self.string_to_sign(request=new_request)
        signature = self.signature(
            string_to_sign=string_to_sign,
            secret_key=identity.secret_access_key,
        )
        authorization = self.generate_authorization_field(
            access_key_id=identity.access_key_id, signature=signature
        )
        new_request.fields.set_field(authorization)
        logger.debug(
            "Signed %s request to %s", new_request.method, new_request.destination.host
        )
        return new_request

    def generate_authorization_field(
        self, *, access_key_id: str, signature: str
    ) -> Field:
        """Generate the `Authorization` field.

        Defined as: ``SNDA <access_key_id>:<signature>``
        """
        return Field(
            name=AUTHORIZATION_HEADER,
            values=[f"{SNDA_AUTH_SCHEME} {access_key_id}:{signature}"],
        )

    def string_to_sign(self, *, request: SNDARequest) -> str:
        """Build the canonical string to sign for a request.

        The string to sign is defined as:
            <HTTPMethod>\n
            <ContentType>\n
            <Range>\n
            <Date>\n
            <CanonicalResource>\n
            <CanonicalizedHeaders>

        with exactly one trailing newline removed from the result. The request must
        already carry its ``Date`` field.

        :param request: The request to canonicalize. It is not modified.
        """
        date = self._format_date(request=request)
        buffer = (
            f"{request.method}\n"
            f"{self._format_payload_metadata(request=request)}\n"
            f"{self._format_range(request=request)}\n"
            f"{date}\n"
            f"{self._format_canonical_resource(request=request)}\n"
            f"{self._format_canonical_fields(request=request)}"
        )
        # There is no terminating newline after the last line.
        if buffer.endswith("\n"):
            buffer = buffer[:-1]
        if self._signature_wire.enabled():
            self._signature_wire.output(buffer)
        return buffer

    def signature(self, *, string_to_sign: str, secret_key: str | None) -> str:
        """Compute the base64 encoded HMAC-SHA1 of the string to sign.

        :param string_to_sign: String generated from the `string_to_sign` method.
        :param secret_key: The secret key, encoded as UTF-8 to form the HMAC key.
        """
        if not secret_key:
            raise MissingCredentialError(
                "Cannot sign request without a secret access key."
            )
        digest = self._hash(key=secret_key, value=string_to_sign)
        signature = base64.b64encode(digest).decode("ascii")
        if self._signature_wire.enabled():
            self._signature_wire.input(signature)
        return signature

    def _hash(self, *, key: str, value: str) -> bytes:
        try:
            return hmac.new(
                key=key.encode("utf-8"), msg=value.encode("utf-8"), digestmod=sha1
            ).digest()
        except (AttributeError, TypeError, ValueError) as e:
            raise SigningError(f"Unable to compute HMAC-SHA1 signature: {e}") from e

    def _validate_identity(self, *, identity: SNDACredentialIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, _SNDACredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"SNDACredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )
        elif not identity.access_key_id:
            raise MissingCredentialError("Provided identity has no access key id.")
        elif not identity.secret_access_key:
            raise MissingCredentialError("Provided identity has no secret access key.")

    def _resolve_date(
        self, *, signing_properties: SNDASigningProperties | None
    ) -> str:
        if signing_properties is not None and "date" in signing_properties:
            return signing_properties["date"]
        return format_http_date(self._clock())

    def _generate_new_request(self, *, request: SNDARequest) -> SNDARequest:
        return deepcopy(request)

    def _apply_date_fields(self, *, request: SNDARequest, date: str) -> None:
        # The signed Date must be byte-identical to the transmitted one, so it is
        # set before the string to sign is built.
        request.fields.set_field(Field(name=DATE_HEADER, values=[date]))
        if SNDA_DATE_HEADER in request.fields:
            request.fields[SNDA_DATE_HEADER].set([date])

    def _format_payload_metadata(self, *, request: SNDARequest) -> str:
        return request.content_type or ""

    def _format_range(self, *, request: SNDARequest) -> str:
        # Only a field spelled exactly "Range" takes part.
        field = request.fields.get(RANGE_HEADER)
        if field is None or field.name != RANGE_HEADER or not field.values:
            return ""
        return field.values[0].lower()

    def _format_date(self, *, request: SNDARequest) -> str:
        field = request.fields.get(DATE_HEADER)
        if field is None or not field.values:
            raise MissingExpectedParameterException(
                "Cannot generate string_to_sign without a Date field on the request."
            )
        return field.values[0]

    def _format_canonical_resource(self, *, request: SNDARequest) -> str:
        return (request.destination.path or "").lower()

    def _format_canonical_fields(self, *, request: SNDARequest) -> str:
        fields = self._normalize_signing_fields(request=request)
        return "".join(f"{key}:{value}\n" for key, value in fields.items())

    def _normalize_signing_fields(self, *, request: SNDARequest) -> dict[str, str]:
        # Ordered by the name as supplied; lower-cased only when emitted.
        signable_fields = sorted(
            (
                field
                for field in request.fields.get_by_type(FieldPosition.HEADER)
                if field.values and _is_signable_header(field.name.lower())
            ),
            key=lambda field: field.name,
        )
        return {
            field.name.lower(): " ".join(
                _normalize_field_value(value) for value in field.values
            )
            for field in signable_fields
        }


class AsyncSNDASigner:
    """Request signer for the GrandCloud storage HMAC-SHA1 scheme.

    The clock may be a coroutine function; it is awaited before any part of the
    string to sign is built.
    """

    def __init__(
        self,
        *,
        clock: AsyncClock | None = None,
        signature_wire: SignatureWire | None = None,
        config: SignerConfig | None = None,
    ) -> None:
        self._clock = clock or _utc_now
        if signature_wire is None:
            signature_wire = _default_signature_wire(config)
        self._signature_wire = signature_wire

    async def sign(
        self,
        *,
        request: SNDARequest,
        identity: SNDACredentialIdentity,
        signing_properties: SNDASigningProperties | None = None,
    ) -> SNDARequest:
        """Generate and apply a signature to a copy of the supplied request.

        :param request: An SNDARequest to sign prior to sending to the service.
        :param identity: The credentials to sign with. They are read once per call.
        :param signing_properties: Optional overrides, such as a preformatted
            ``date``.
        """
        await self._validate_identity(identity=identity)
        date = await self._resolve_date(signing_properties=signing_properties)

        new_request = await self._generate_new_request(request=request)
        await self._apply_date_fields(request=new_request, date=date)

        string_to_sign = await self.string_to_sign(request=new_request)
        signature = await self.signature(
            string_to_sign=string_to_sign,
            secret_key=identity.secret_access_key,
        )
        authorization = await self.generate_authorization_field(
            access_key_id=identity.access_key_id, signature=signature
        )
        new_request.fields.set_field(authorization)
        logger.debug(
            "Signed %s request to %s", new_request.method, new_request.destination.host
        )
        return new_request

    async def sign_with_resolver(
        self,
        *,
        request: SNDARequest,
        identity_resolver: IdentityResolver[SNDACredentialIdentity, Any],
        signing_properties: SNDASigningProperties | None = None,
    ) -> SNDARequest:
        """Resolve a fresh identity and sign a copy of the supplied request.

        The resolver is consulted on every call; its result is not retained.
        """
        identity = await identity_resolver.get_identity(properties={})
        return await self.sign(
            request=request, identity=identity, signing_properties=signing_properties
        )

    async def generate_authorization_field(
        self, *, access_key_id: str, signature: str
    ) -> Field:
        """Generate the `Authorization` field.

        Defined as: ``SNDA <access_key_id>:<signature>``
        """
        return Field(
            name=AUTHORIZATION_HEADER,
            values=[f"{SNDA_AUTH_SCHEME} {access_key_id}:{signature}"],
        )

    async def string_to_sign(self, *, request: SNDARequest) -> str:
        """Build the canonical string to sign for a request.

        See :py:meth:`SNDASigner.string_to_sign` for the format.
        """
        date = await self._format_date(request=request)
        buffer = (
            f"{request.method}\n"
            f"{await self._format_payload_metadata(request=request)}\n"
            f"{await self._format_range(request=request)}\n"
            f"{date}\n"
            f"{await self._format_canonical_resource(request=request)}\n"
            f"{await self._format_canonical_fields(request=request)}"
        )
        # There is no terminating newline after the last line.
        if buffer.endswith("\n"):
            buffer = buffer[:-1]
        if self._signature_wire.enabled():
            self._signature_wire.output(buffer)
        return buffer

    async def signature(self, *, string_to_sign: str, secret_key: str | None) -> str:
        """Compute the base64 encoded HMAC-SHA1 of the string to sign."""
        if not secret_key:
            raise MissingCredentialError(
                "Cannot sign request without a secret access key."
            )
        digest = await self._hash(key=secret_key, value=string_to_sign)
        signature = base64.b64encode(digest).decode("ascii")
        if self._signature_wire.enabled():
            self._signature_wire.input(signature)
        return signature

    async def _hash(self, *, key: str, value: str) -> bytes:
        try:
            return hmac.new(
                key=key.encode("utf-8"), msg=value.encode("utf-8"), digestmod=sha1
            ).digest()
        except (AttributeError, TypeError, ValueError) as e:
            raise SigningError(f"Unable to compute HMAC-SHA1 signature: {e}") from e

    async def _validate_identity(self, *, identity: SNDACredentialIdentity) -> None:
        """Perform runtime and expiration checks before attempting signing."""
        if not isinstance(identity, _SNDACredentialsIdentity):  # pyright: ignore
            raise ValueError(
                "Received unexpected value for identity parameter. Expected "
                f"SNDACredentialIdentity but received {type(identity)}."
            )
        elif identity.is_expired:
            raise ValueError(
                f"Provided identity expired at {identity.expiration}. Please "
                "refresh the credentials or update the expiration parameter."
            )
        elif not identity.access_key_id:
            raise MissingCredentialError("Provided identity has no access key id.")
        elif not identity.secret_access_key:
            raise MissingCredentialError("Provided identity has no secret access key.")

    async def _resolve_date(
        self, *, signing_properties: SNDASigningProperties | None
    ) -> str:
        if signing_properties is not None and "date" in signing_properties:
            return signing_properties["date"]
        now = self._clock()
        if isawaitable(now):
            now = await now
        return format_http_date(now)

    async def _generate_new_request(self, *, request: SNDARequest) -> SNDARequest:
        return deepcopy(request)

    async def _apply_date_fields(self, *, request: SNDARequest, date: str) -> None:
        request.fields.set_field(Field(name=DATE_HEADER, values=[date]))
        if SNDA_DATE_HEADER in request.fields:
            request.fields[SNDA_DATE_HEADER].set([date])

    async def _format_payload_metadata(self, *, request: SNDARequest) -> str:
        return request.content_type or ""

    async def _format_range(self, *, request: SNDARequest) -> str:
        field = request.fields.get(RANGE_HEADER)
        if field is None or field.name != RANGE_HEADER or not field.values:
            return ""
        return field.values[0].lower()

    async def _format_date(self, *, request: SNDARequest) -> str:
        field = request.fields.get(DATE_HEADER)
        if field is None or not field.values:
            raise MissingExpectedParameterException(
                "Cannot generate string_to_sign without a Date field on the request."
            )
        return field.values[0]

    async def _format_canonical_resource(self, *, request: SNDARequest) -> str:
        return (request.destination.path or "").lower()

    async def _format_canonical_fields(self, *, request: SNDARequest) -> str:
        fields = await self._normalize_signing_fields(request=request)
        return "".join(f"{key}:{value}\n" for key, value in fields.items())

    async def _normalize_signing_fields(
        self, *, request: SNDARequest
    ) -> dict[str, str]:
        # Ordered by the name as supplied; lower-cased only when emitted.
        signable_fields = sorted(
            (
                field
                for field in request.fields.get_by_type(FieldPosition.HEADER)
                if field.values and _is_signable_header(field.name.lower())
            ),
            key=lambda field: field.name,
        )
        return {
            field.name.lower(): " ".join(
                _normalize_field_value(value) for value in field.values
            )
            for field in signable_fields
        }


def _is_signable_header(field_name: str) -> bool:
    """Whether a lower-cased field name belongs in the canonicalized headers.

    The signature header itself is excluded so that re-signing a request does not
    sign over a stale signature.
    """
    return (
        field_name.startswith(SNDA_HEADER_PREFIX)
        and field_name != SNDA_SIGNATURE_HEADER
    )


def _normalize_field_value(value: str) -> str:
    """Collapse double spaces to one, then remove line breaks.

    Each pass is a single left-to-right replacement, so three spaces become two.
    """
    return _NEWLINE_RE.sub("", value.replace("  ", " "))
