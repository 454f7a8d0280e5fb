"""Prompt manager API adapter package.

Architectural role:
- Defines the external interaction boundary for HTTP and CLI interfaces.
- Performs transport-level validation and response shaping.
- Delegates persistence, export, and join/split work to lower layers.

Scope:
- Request lifecycle control for adapter concerns only.
- No join/split rules or SQL are implemented in this package.
"""
