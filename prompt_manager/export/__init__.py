"""Prompt file export package.

Scope:
    Writes joined prompt text to the user-configured output file that the
    image-generation pipeline reads, and checks output paths for writability.

Non-goals:
    - No image generation; the pipeline consumes the file on its own.
"""
