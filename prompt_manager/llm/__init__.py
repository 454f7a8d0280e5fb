"""LLM access package.

Architectural role:
    Provides configuration defaults, request-payload construction, and the
    transport adapter used by the API layer to translate or improve phrase text
    through an OpenAI-compatible backend.

Module split:
    - `provider_config`: environment-driven defaults and key lookup.
    - `service`: settings-to-payload adapter.
    - `client`: HTTP transport and response parsing.
"""
