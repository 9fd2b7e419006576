"""
cochain core - handler registry and waterfall dispatch.

This package contains:
- result: tagged handler results and the folding rule
- handler: calling-convention tags and once-wrappers
- registry: chain storage, style enforcement, dispatch
- emitter: Emitter and Middleware vocabularies
- mixin: composition helpers (component, bind)
"""

__all__ = []
