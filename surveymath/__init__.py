"""
Surveymath package for survey response analysis.

This is the analysis service behind the survey admin panel: PCA projection
of multi-select answers and word cloud aggregation of interview logs.
"""

__version__ = '0.1.0'

from surveymath.system import System, SystemManager
from surveymath.components.config import Config, ConfigManager
