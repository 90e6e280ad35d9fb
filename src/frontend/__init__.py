"""Front-end pipeline glue for parsing and analysis."""

from loguru import logger

from .pipeline import AnalysisOptions, AnalysisResult, FrontEndResult, run_frontend

logger.disable(__name__)

__all__ = ["AnalysisOptions", "AnalysisResult", "FrontEndResult", "run_frontend"]
