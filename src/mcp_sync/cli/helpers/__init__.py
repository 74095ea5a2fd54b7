"""
CLI helper functions and utilities.
"""

from .configuration import read_config_option
from .display import (
    item_to_dict,
    show_archives_table,
    show_batch_result,
    show_diff,
    show_item_details,
    show_items_table,
    show_skills_table,
    show_snapshot,
)
from .errors import handle_errors

__all__ = [
    'read_config_option',
    'item_to_dict',
    'show_archives_table',
    'show_batch_result',
    'show_diff',
    'show_item_details',
    'show_items_table',
    'show_skills_table',
    'show_snapshot',
    'handle_errors',
]
