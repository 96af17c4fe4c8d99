# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
import logging

from .interfaces.wire import SignatureWire

WIRE_LOGGER_NAME = "snda_signers.wire"


class LoggingSignatureWire(SignatureWire):
    """Writes signing material to a logger at DEBUG level.

    The wire is disabled unless constructed with ``enabled=True``. Data sent while
    disabled is dropped.
    """

    def __init__(
        self, *, enabled: bool = False, logger: logging.Logger | None = None
    ) -> None:
        self._enabled = enabled
        self._logger = logger or logging.getLogger(WIRE_LOGGER_NAME)

    def enabled(self) -> bool:
        return self._enabled

    def output(self, data: str) -> None:
        if self._enabled:
            self._logger.debug(">> %s", data)

    def input(self, data: str) -> None:
        if self._enabled:
            self._logger.debug("<< %s", data)
