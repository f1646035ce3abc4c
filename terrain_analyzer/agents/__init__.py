"""Reasoning service client."""

from .route_analyst import AnalystReply, RouteAnalyst, build_analysis_prompt, parse_analysis_json

__all__ = ["AnalystReply", "RouteAnalyst", "build_analysis_prompt", "parse_analysis_json"]
