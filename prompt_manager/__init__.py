"""Prompt manager: assemble, curate, and export image-generation prompts."""

__version__ = "0.1.0"
