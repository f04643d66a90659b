"""
Server component for survey analysis.

This module provides a FastAPI server exposing the admin analytics:
the PCA scatter plot data, the interview word cloud and the log statistics.
"""

import logging
import threading
from typing import Dict, List, Literal, Optional

import fastapi
from fastapi import FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from surveymath.components.config import Config, ConfigManager
from surveymath.database import PostgresClient, PostgresManager
from surveymath.math.pca import DegenerateInputError
from surveymath.survey.analysis import analyze_responses
from surveymath.survey.stats import aggregate_stats
from surveymath.wordcloud import build_word_cloud, resolve_time_range

# Set up logging
logger = logging.getLogger(__name__)

FETCH_FAILED_MESSAGE = "データの取得に失敗しました"

PCA_FAILED_MESSAGE = "PCAの計算に失敗しました"

WORDCLOUD_FAILED_MESSAGE = "ワードクラウドデータの取得に失敗しました"

STATS_FAILED_MESSAGE = "統計データの取得に失敗しました"


# Define API models
class PCAPoint(BaseModel):
    """Projected response."""

    id: Optional[str] = None
    respondent_type: Optional[str] = None
    x: float
    y: float


class PCAResponse(BaseModel):
    """PCA scatter plot data."""

    points: List[PCAPoint]
    explainedVariance: List[float]
    message: Optional[str] = None


class WordCloudWord(BaseModel):
    """Word cloud entry."""

    text: str
    value: int


class DateRange(BaseModel):
    start: str
    end: str


class WordCloudMetadata(BaseModel):
    totalResponses: int
    dateRange: DateRange


class WordCloudResponse(BaseModel):
    """Word cloud data."""

    words: List[WordCloudWord]
    metadata: WordCloudMetadata


class StatsResponse(BaseModel):
    """Interview log counts."""

    totalCount: int
    slugDistribution: Dict[str, int]
    issueDistribution: Dict[str, int]
    competencyDistribution: Dict[str, int]
    coreItemsDistribution: Dict[str, int]


class Server:
    """
    FastAPI server for survey analysis.
    """

    def __init__(self,
                 db: Optional[PostgresClient] = None,
                 config: Optional[Config] = None):
        """
        Initialize a server.

        Args:
            db: Database client (defaults to the shared client)
            config: Configuration for the server
        """
        self.config = config or ConfigManager.get_config()
        self.db = db or PostgresManager.get_client()

        self.app = FastAPI(
            title="Survey Analysis API",
            description="Analytics for the survey admin panel",
            version="0.1.0"
        )

        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=self.config.get('server.cors-origins', ['*']),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        self._setup_routes()
        self._setup_validation()
        self._setup_error_handling()

        self._running = False
        self._server_thread = None
        self._uvicorn = None

    def _setup_routes(self) -> None:
        """
        Set up API routes.
        """
        @self.app.get("/health")
        def health_check():
            return {"status": "ok"}

        @self.app.get("/api/admin/forms/pca",
                      response_model=PCAResponse,
                      response_model_exclude_none=True)
        def form_pca():
            try:
                rows = self.db.get_form_responses()
            except SQLAlchemyError:
                logger.exception("Failed to fetch form responses for PCA")
                return JSONResponse(status_code=500, content={"error": FETCH_FAILED_MESSAGE})

            try:
                return analyze_responses(
                    rows,
                    seed=self.config.get('pca.seed'),
                    iters=self.config.get('pca.iters', 100),
                    min_samples=self.config.get('pca.min-samples', 3)
                )
            except DegenerateInputError:
                logger.exception("PCA calculation failed")
                return JSONResponse(status_code=500, content={"error": PCA_FAILED_MESSAGE})
            except Exception:
                logger.exception("Unexpected error in PCA calculation")
                return JSONResponse(status_code=500, content={"error": PCA_FAILED_MESSAGE})

        @self.app.get("/api/admin/wordcloud", response_model=WordCloudResponse)
        def word_cloud(
            time_range: Literal['7d', '30d', '90d', 'all'] = Query('all', alias='timeRange'),
            min_frequency: Optional[int] = Query(None, alias='minFrequency', ge=1),
            max_words: Optional[int] = Query(None, alias='maxWords', ge=1),
            source: Literal['keywords', 'messages'] = Query('keywords')
        ):
            if min_frequency is None:
                min_frequency = self.config.get('wordcloud.min-frequency', 2)
            if max_words is None:
                max_words = self.config.get('wordcloud.max-words', 50)

            try:
                logs = self.db.get_survey_logs(since=resolve_time_range(time_range))
            except SQLAlchemyError:
                logger.exception("Failed to fetch survey logs for word cloud")
                return JSONResponse(status_code=500, content={"error": WORDCLOUD_FAILED_MESSAGE})

            return build_word_cloud(logs, min_frequency, max_words, source)

        @self.app.get("/api/admin/stats", response_model=StatsResponse)
        def stats():
            try:
                logs = self.db.get_survey_logs()
            except SQLAlchemyError:
                logger.exception("Failed to fetch survey logs for statistics")
                return JSONResponse(status_code=500, content={"error": STATS_FAILED_MESSAGE})

            return aggregate_stats(logs)

    def _setup_validation(self) -> None:
        """
        Set up request validation.
        """
        @self.app.exception_handler(fastapi.exceptions.RequestValidationError)
        async def validation_exception_handler(request, exc):
            return JSONResponse(
                status_code=422,
                content={"detail": str(exc)}
            )

    def _setup_error_handling(self) -> None:
        """
        Set up error handling.
        """
        @self.app.exception_handler(Exception)
        async def generic_exception_handler(request, exc):
            logger.exception("Unhandled exception")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error"}
            )

    def start(self) -> None:
        """
        Start the server.
        """
        if self._running:
            return

        # Import uvicorn here to avoid circular imports
        import uvicorn
        self._uvicorn = uvicorn

        port = self.config.get('server.port', 8080)
        host = self.config.get('server.host', '0.0.0.0')

        def run_server():
            self._uvicorn.run(
                self.app,
                host=host,
                port=port,
                log_level=self.config.get('logging.level', 'info')
            )

        self._server_thread = threading.Thread(
            target=run_server,
            daemon=True
        )
        self._server_thread.start()

        self._running = True

        logger.info(f"Server started at {self.config.get('server-url')}")

    def stop(self) -> None:
        """
        Stop the server.
        """
        if not self._running:
            return

        # There's no clean way to stop uvicorn, so we'll just set the flag
        self._running = False

        logger.info("Server stopping (full shutdown requires process restart)")


class ServerManager:
    """
    Singleton manager for the server.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_server(cls,
                   db: Optional[PostgresClient] = None,
                   config: Optional[Config] = None) -> Server:
        """
        Get the server instance.

        Args:
            db: Database client
            config: Configuration

        Returns:
            Server instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Server(db, config)

            return cls._instance

    @classmethod
    def shutdown(cls) -> None:
        """
        Shut down the server.
        """
        with cls._lock:
            if cls._instance is not None:
                cls._instance.stop()
                cls._instance = None
