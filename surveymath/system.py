"""
System integration for survey analysis.

This module ties together configuration, the database client and the
HTTP server, and manages their lifecycle.
"""

import logging
import threading
import signal
from typing import Optional, Any
import atexit

from surveymath.components.config import Config, ConfigManager
from surveymath.components.server import ServerManager
from surveymath.database import PostgresConfig, PostgresManager

# Set up logging
logger = logging.getLogger(__name__)


class System:
    """
    Main system for survey analysis.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the system.

        Args:
            config: Configuration for the system
        """
        self.config = config or ConfigManager.get_config()

        self.db = None
        self.server = None

        self._running = False
        self._stop_event = threading.Event()

    def _database_config(self) -> PostgresConfig:
        return PostgresConfig(
            url=self.config.get('database.url'),
            pool_size=self.config.get('database.pool-size'),
            max_overflow=self.config.get('database.max-overflow')
        )

    def initialize(self) -> None:
        """
        Initialize the system.
        """
        if self._running:
            return

        logger.info("Initializing system")

        self.db = PostgresManager.get_client(self._database_config())
        self.server = ServerManager.get_server(self.db, self.config)

        logger.info("System initialized")

    def start(self) -> None:
        """
        Start the system.
        """
        if self._running:
            return

        self.initialize()

        logger.info("Starting system")

        self._stop_event.clear()
        self.server.start()
        self._running = True

        self._register_shutdown_handlers()

        logger.info("System started")

    def stop(self) -> None:
        """
        Stop the system.
        """
        if not self._running:
            return

        logger.info("Stopping system")

        self._stop_event.set()

        # Stop components in reverse order
        if self.server:
            ServerManager.shutdown()
            self.server = None

        if self.db:
            PostgresManager.shutdown()
            self.db = None

        self._running = False

        logger.info("System stopped")

    def _register_shutdown_handlers(self) -> None:
        """
        Register shutdown handlers.
        """
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self._signal_handler)

        atexit.register(self.stop)

    def _signal_handler(self, signum: int, frame: Any) -> None:
        """
        Handle signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        logger.info(f"Received signal {signum}")
        self.stop()

    def wait_for_shutdown(self) -> None:
        """
        Wait for system shutdown.
        """
        self._stop_event.wait()


class SystemManager:
    """
    Singleton manager for the system.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_system(cls, config: Optional[Config] = None) -> System:
        """
        Get the system instance.

        Args:
            config: Configuration for the system

        Returns:
            System instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = System(config)

            return cls._instance

    @classmethod
    def start(cls, config: Optional[Config] = None) -> System:
        """
        Start the system.

        Args:
            config: Configuration for the system

        Returns:
            System instance
        """
        system = cls.get_system(config)
        system.start()
        return system

    @classmethod
    def stop(cls) -> None:
        """
        Stop the system.
        """
        with cls._lock:
            if cls._instance is not None:
                cls._instance.stop()
                cls._instance = None
