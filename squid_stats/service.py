"""Service wiring - builds and owns every pipeline component."""

import logging

import httpx

from .analysis import PlayerSummary, StatsAggregator
from .api import HistoryFetcher
from .cache import ResponseCache, TransactionRecordCache
from .chain import AbiTxDecoder, ChainClient, TxDecoder, Web3ChainClient, load_abi
from .config import Config
from .db import Repository
from .ingestion import Backfill, BackfillReport, PlayIngestor, TransactionService

logger = logging.getLogger(__name__)


class SquidStatsService:
    """Main application class that orchestrates all components."""

    def __init__(
        self,
        config: Config,
        chain: ChainClient | None = None,
        decoder: TxDecoder | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.config = config

        # Chain access is created once and handed to every component
        self._owns_chain = chain is None
        self.chain = chain or Web3ChainClient(
            config.chain.rpc_url,
            abis={config.chain.player_contract: config.chain.player_abi},
        )
        self.decoder = decoder or AbiTxDecoder(load_abi(config.chain.game_abi))

        self.repository = Repository(config.database.path)
        self.response_cache = ResponseCache(config.cache.response_dir, client=http_client)
        self.transaction_cache = TransactionRecordCache(config.cache.transaction_dir)

        self.fetcher = HistoryFetcher(
            self.response_cache,
            api_base=config.explorer.api_base,
            api_key=config.explorer.api_key,
            window_size=config.explorer.window_size,
            page_size=config.explorer.page_size,
            ttl_seconds=config.cache.response_ttl_seconds,
        )
        self.transactions = TransactionService(self.chain, self.decoder, self.transaction_cache)
        self.ingestor = PlayIngestor(self.transactions, self.repository)
        self.backfill = Backfill(
            chain=self.chain,
            fetcher=self.fetcher,
            ingestor=self.ingestor,
            contract=config.chain.game_contract,
            start_block=config.chain.start_block,
            selector=config.chain.play_selector,
        )
        self.aggregator = StatsAggregator(
            self.repository,
            self.chain,
            config.chain.player_contract,
        )

    async def start(self):
        """Open the database."""
        logger.info("Starting squid-stats...")
        await self.repository.initialize()

    async def stop(self):
        """Release the database, HTTP client and RPC provider."""
        logger.info("Stopping squid-stats...")
        await self.response_cache.close()
        await self.repository.close()
        if self._owns_chain and isinstance(self.chain, Web3ChainClient):
            await self.chain.close()

    async def run_backfill(
        self,
        from_block: int | None = None,
        to_block: int | None = None,
    ) -> BackfillReport:
        return await self.backfill.run(from_block, to_block)

    async def player_summary(self, player: str) -> PlayerSummary:
        return await self.aggregator.compute_summary(player)
