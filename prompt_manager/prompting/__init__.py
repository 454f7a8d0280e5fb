"""Prompting package.

This package contains the deterministic text helpers of the application: the
token join/split engine, phrase duplicate detection, and LLM instruction
assembly. It does not perform persistence, file export, or model invocation.
"""
