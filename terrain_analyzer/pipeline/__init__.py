"""Pipeline-based route analysis."""

from .analysis_pipeline import RouteAnalysisPipeline, parse_request

__all__ = ["RouteAnalysisPipeline", "parse_request"]
