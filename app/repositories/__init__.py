"""
app/repositories package marker.
"""

from app.repositories.parse_result_repository import ParseResultRepository

__all__ = [
    "ParseResultRepository",
]
