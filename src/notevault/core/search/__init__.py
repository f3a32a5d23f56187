"""Full-text search index over notes."""

from .base import SearchDocument, SearchIndex, SearchIndexError, build_document
from .tokenizer import tokenize

__all__ = ["build_document", "SearchDocument", "SearchIndex", "SearchIndexError", "tokenize"]
