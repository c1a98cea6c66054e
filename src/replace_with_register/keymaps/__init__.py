"""Key bindings: value types, the registry, and the resolver.

``keymaps.defaults`` imports the action handlers, so it is imported on
demand rather than from here.
"""

from .models import ActionRef, Binding, KeySequence, WhenClause, normalize_key
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .resolver import KeymapResolver, ResolutionMatch, ResolutionResult

__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "KeymapConflictError",
    "KeymapRegistry",
    "KeymapResolver",
    "RegistryStats",
    "ResolutionMatch",
    "ResolutionResult",
    "WhenClause",
    "normalize_key",
]
