"""Poshanix AI proxy: relays food-label OCR text and chat to an upstream LLM."""

__version__ = "0.1.0"
