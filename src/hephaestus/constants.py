"""
Shared constants for query compilation and execution.
"""

# Page size used when QueryOptions.limit is 0
DEFAULT_LIMIT = 100

# Placeholder prefix for projected attribute names
PROJECTION_PLACEHOLDER = "#p"


class PageState:
    HAS_MORE = "has_more"
    EXHAUSTED = "exhausted"
