"""Prompt text and layout constants."""
