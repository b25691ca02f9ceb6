# Infrastructure Package
from .state_file import StateFileError, load_item_states

__all__ = ["StateFileError", "load_item_states"]
