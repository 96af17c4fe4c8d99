# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class SNDASDKException(Exception):
    """Top-level exception to capture signer-related errors."""


class SigningError(SNDASDKException):
    """The signature could not be computed from the supplied key and message.

    The underlying failure is chained as ``__cause__``.
    """


class MissingCredentialError(SigningError, ValueError):
    """The identity used for signing has no secret key or access key id."""


class MissingExpectedParameterException(SNDASDKException, ValueError):
    """A request is missing a value required to build the string to sign."""
