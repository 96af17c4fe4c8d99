# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import os
from collections.abc import Mapping
from typing import Any

from ._identity import SNDACredentialIdentity
from .exceptions import MissingCredentialError
from .interfaces.identity import IdentityResolver

IdentityProperties = Mapping[str, Any]

ACCESS_KEY_ID_ENV_VAR = "SNDA_ACCESS_KEY_ID"
SECRET_ACCESS_KEY_ENV_VAR = "SNDA_SECRET_ACCESS_KEY"


class StaticCredentialsResolver(
    IdentityResolver[SNDACredentialIdentity, IdentityProperties]
):
    """Resolve static GrandCloud credentials."""

    def __init__(self, *, credentials: SNDACredentialIdentity) -> None:
        self._credentials = credentials

    async def get_identity(
        self, *, properties: IdentityProperties
    ) -> SNDACredentialIdentity:
        return self._credentials


class EnvironmentCredentialsResolver(
    IdentityResolver[SNDACredentialIdentity, IdentityProperties]
):
    """Resolves GrandCloud credentials from system environment variables.

    The environment is read on every call so that rotated keys are picked up by
    the next signed request.
    """

    async def get_identity(
        self, *, properties: IdentityProperties
    ) -> SNDACredentialIdentity:
        access_key_id = os.getenv(ACCESS_KEY_ID_ENV_VAR)
        secret_access_key = os.getenv(SECRET_ACCESS_KEY_ENV_VAR)

        if not access_key_id or not secret_access_key:
            raise MissingCredentialError(
                f"{ACCESS_KEY_ID_ENV_VAR} and {SECRET_ACCESS_KEY_ENV_VAR} are required"
            )

        return SNDACredentialIdentity(
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
        )
