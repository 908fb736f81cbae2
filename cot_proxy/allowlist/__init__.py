from .matcher import is_allowed, pattern_matches

__all__ = ["is_allowed", "pattern_matches"]
