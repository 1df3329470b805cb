from __future__ import annotations

from .store import DOWNVOTE, REGISTRY, UPVOTE, RegistryStore

__all__ = ["RegistryStore", "REGISTRY", "UPVOTE", "DOWNVOTE"]
