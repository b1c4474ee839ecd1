"""Backfill - replays a contract's history into the database."""

import logging
from dataclasses import asdict, dataclass

from ..api import HistoryFetcher
from ..chain import ChainClient
from .ingestor import IngestStatus, PlayIngestor
from .selector import is_play_candidate

logger = logging.getLogger(__name__)


@dataclass
class BackfillReport:
    """Counters for a single backfill run."""

    from_block: int
    to_block: int
    windows: int = 0
    rows_seen: int = 0
    candidates: int = 0
    inserted: int = 0
    already_present: int = 0
    rejected: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


class Backfill:
    """
    Walks the game contract's history and ingests every play transaction.

    Runs inline and strictly in block order. Rejected transactions are
    logged and skipped; store and network errors abort the run.
    """

    def __init__(
        self,
        chain: ChainClient,
        fetcher: HistoryFetcher,
        ingestor: PlayIngestor,
        contract: str,
        start_block: int,
        selector: str,
    ):
        self.chain = chain
        self.fetcher = fetcher
        self.ingestor = ingestor
        self.contract = contract
        self.start_block = start_block
        self.selector = selector

    async def run(
        self,
        from_block: int | None = None,
        to_block: int | None = None,
    ) -> BackfillReport:
        """
        Ingest plays in blocks [from_block, to_block).

        Defaults to the configured start block and the current chain head.
        """
        if from_block is None:
            from_block = self.start_block
        if to_block is None:
            to_block = await self.chain.get_block_number()

        report = BackfillReport(from_block=from_block, to_block=to_block)
        logger.info(f"Backfilling {self.contract} from block {from_block} to {to_block}")

        windows_before = self.fetcher.windows_fetched
        async for row in self.fetcher.fetch_range(self.contract, from_block, to_block):
            report.rows_seen += 1
            if not is_play_candidate(row.input, self.selector):
                continue
            report.candidates += 1

            outcome = await self.ingestor.ingest(row.hash, row.timestamp)
            if outcome.status is IngestStatus.INSERTED:
                report.inserted += 1
            elif outcome.status is IngestStatus.ALREADY_PRESENT:
                report.already_present += 1
            else:
                report.rejected += 1
                logger.warning(f"Skipping {row.hash}: {outcome.reason}")

        report.windows = self.fetcher.windows_fetched - windows_before
        logger.info(
            f"Backfill done: {report.windows} windows, {report.candidates} candidates, "
            f"{report.inserted} inserted, {report.already_present} already present, "
            f"{report.rejected} rejected"
        )
        return report
