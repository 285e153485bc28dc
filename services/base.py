"""Services container shared by the CLI commands."""

from config import Config
from db.manager import DatabaseManager
from services.investments import InvestmentService
from services.staging import StagingService
from services.transactions import TransactionService


class Services:
    """Every service, built over one database manager.

    Args:
        config: Application configuration.
        db_manager: Database manager to use instead of one built from config
            (tests pass an in-memory one).
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        self.transactions = TransactionService(self.db_manager)
        self.investments = InvestmentService(self.db_manager)
        self.staging = StagingService(self.db_manager)
