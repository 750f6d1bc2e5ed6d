"""Retrieval and ranking modules."""

from .ranker import RelevanceRanker, rank, most_recent
from .context import ContextBuilder

__all__ = ["RelevanceRanker", "rank", "most_recent", "ContextBuilder"]
