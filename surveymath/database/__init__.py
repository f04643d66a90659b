"""
Database integration for survey analysis.

This module provides functionality for connecting to the database
and reading survey responses and interview logs.
"""

from surveymath.database.postgres import (
    PostgresConfig, PostgresClient, PostgresManager,
    FormResponse, SurveyLog
)
