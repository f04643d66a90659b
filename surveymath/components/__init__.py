"""
System components for survey analysis.

This module provides the configuration and the HTTP server.
"""

from surveymath.components.config import Config, ConfigManager
from surveymath.components.server import Server, ServerManager
