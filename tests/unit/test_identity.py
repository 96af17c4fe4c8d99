# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from datetime import UTC, datetime, timedelta

import pytest
from snda_signers import SNDACredentialIdentity
from snda_signers.interfaces.identity import SNDACredentialsIdentity


@pytest.mark.parametrize(
    "access_key_id,secret_access_key,expiration",
    [
        ("AKID1234EXAMPLE", "SECRET1234", None),
        ("AKID1234EXAMPLE", "SECRET1234", datetime(2024, 5, 1, tzinfo=UTC)),
        ("AKID1234EXAMPLE", None, None),
    ],
)
def test_snda_credential_identity(
    access_key_id: str,
    secret_access_key: str | None,
    expiration: datetime | None,
) -> None:
    creds = SNDACredentialIdentity(
        access_key_id=access_key_id,
        secret_access_key=secret_access_key,
        expiration=expiration,
    )
    assert creds.access_key_id == access_key_id
    assert creds.secret_access_key == secret_access_key
    assert creds.expiration == expiration
    assert isinstance(creds, SNDACredentialsIdentity)


@pytest.mark.parametrize(
    "expiration,is_expired",
    [
        (None, False),
        (datetime(2024, 5, 1, tzinfo=UTC), True),
        (datetime.now(UTC) + timedelta(hours=1), False),
    ],
)
def test_snda_credential_identity_expired(
    expiration: datetime | None, is_expired: bool
) -> None:
    creds = SNDACredentialIdentity(
        access_key_id="AKID1234EXAMPLE",
        secret_access_key="SECRET1234",
        expiration=expiration,
    )
    assert creds.is_expired is is_expired


def test_secret_is_not_in_repr() -> None:
    creds = SNDACredentialIdentity(
        access_key_id="AKID1234EXAMPLE", secret_access_key="SECRET1234"
    )
    assert "SECRET1234" not in repr(creds)
    assert "AKID1234EXAMPLE" in repr(creds)
