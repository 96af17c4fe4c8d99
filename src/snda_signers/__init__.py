# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""SNDA Signers provides stand-alone request signing for the GrandCloud storage API
for use with HTTP tools such as AioHTTP, Curl, Requests, urllib3, etc."""

from __future__ import annotations

from ._http import Field, Fields, SNDARequest, URI
from ._identity import SNDACredentialIdentity
from .config import SignerConfig
from .credentials_resolvers import (
    EnvironmentCredentialsResolver,
    StaticCredentialsResolver,
)
from .exceptions import MissingCredentialError, SigningError
from .signers import AsyncSNDASigner, SNDASigner, SNDASigningProperties
from .wire import LoggingSignatureWire

__license__ = "Apache-2.0"
__version__ = "0.1.0"

__all__ = (
    "URI",
    "AsyncSNDASigner",
    "EnvironmentCredentialsResolver",
    "Field",
    "Fields",
    "LoggingSignatureWire",
    "MissingCredentialError",
    "SNDACredentialIdentity",
    "SNDARequest",
    "SNDASigner",
    "SNDASigningProperties",
    "SignerConfig",
    "SigningError",
    "StaticCredentialsResolver",
)
