from __future__ import annotations

import logging

from ipfsreg.core.models import ChunkRecord, DecodeSkipped


class LoggingObserver:
    """Default scan observer: forwards records to a stdlib logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def on_chunk(self, record: ChunkRecord) -> None:
        if record.status == "failed":
            self.logger.warning(
                "window [%d, %d] failed: %s", record.from_block, record.to_block, record.error
            )
        else:
            self.logger.debug(
                "window [%d, %d] %s (logs=%d)", record.from_block, record.to_block, record.status, record.logs
            )

    def on_skip(self, record: DecodeSkipped) -> None:
        self.logger.info(
            "skipping %s at block %d: %s", record.transaction_hash, record.block_number, record.reason
        )
