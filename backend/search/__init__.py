"""Search box parsing, filtering and highlighting."""

from backend.search.highlight import locate_highlight
from backend.search.query_parser import parse_query
from backend.search.transaction_filter import filter_transactions, search_transactions

__all__ = ["filter_transactions", "locate_highlight", "parse_query", "search_transactions"]
