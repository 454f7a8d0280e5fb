"""Core shared-infrastructure package.

Architectural role:
    Holds the cross-cutting pieces used by storage, export, LLM, and API
    layers.

Composition:
    - `errors`: HTTP-mappable domain exceptions.
    - `logging_setup`: one-time logging configuration for entrypoints.

Determinism and side effects:
    Package import itself is deterministic and side-effect free.
"""
