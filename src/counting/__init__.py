"""Per-file letter counting."""

from .letters import count_letters

__all__ = ["count_letters"]
