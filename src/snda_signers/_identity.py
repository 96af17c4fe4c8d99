# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass, field
from datetime import datetime

from .interfaces.identity import SNDACredentialsIdentity


@dataclass(kw_only=True)
class SNDACredentialIdentity(SNDACredentialsIdentity):
    access_key_id: str
    secret_access_key: str | None = field(repr=False)
    expiration: datetime | None = None
