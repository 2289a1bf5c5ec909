"""
exprnorm utilities package
"""

from .config import GETTER_PREFIX, SETTER_PREFIX, DEFAULT_INDEXER_NAME

__all__ = ["GETTER_PREFIX", "SETTER_PREFIX", "DEFAULT_INDEXER_NAME"]
