"""FastAPI routers, one module per resource.

Each router delegates to `prompt_manager.storage` (and `export`/`llm` where
relevant) and leaves error rendering to the app-level `HttpError` handler.
"""
