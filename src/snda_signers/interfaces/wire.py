# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

from typing import Protocol, runtime_checkable


@runtime_checkable
class SignatureWire(Protocol):
    """A write-only sink for the plaintext signing material of a request.

    The string to sign can embed sensitive header values, so signers only call
    ``output`` and ``input`` when ``enabled`` returns True.
    """

    def enabled(self) -> bool:
        """Whether the sink currently accepts data."""
        ...

    def output(self, data: str) -> None:
        """Record the string to sign that was produced for a request."""
        ...

    def input(self, data: str) -> None:
        """Record the signature computed over the string to sign."""
        ...
