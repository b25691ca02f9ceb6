# Application Package
from .review_processor import (
    ReviewProcessor,
    apply_review,
    new_item_state,
    process_review,
    quality_from_correctness,
)
from .scheduler import get_due_items, get_next_review_date, get_summary, is_due

__all__ = [
    "ReviewProcessor",
    "apply_review",
    "new_item_state",
    "process_review",
    "quality_from_correctness",
    "get_due_items",
    "get_next_review_date",
    "get_summary",
    "is_due",
]
