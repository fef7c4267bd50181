"""
Ledger Store Core.

Durable storage of transaction records, wallet aggregates and scan
checkpoints. Combines the write and query mixins.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .queries_mixin import QueriesMixin
from .writes_mixin import WritesMixin


class LedgerStore(WritesMixin, QueriesMixin):
    """
    Ledger store over an async session factory.

    Every public method opens its own session, so a single instance is
    shared by the scan engine, the API and the notification hub.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        """
        Initialize store.

        Args:
            session_maker: Async session factory
        """
        self.session_maker = session_maker
