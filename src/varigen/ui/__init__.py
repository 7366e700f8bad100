"""Gradio presentation layer: upload form, prompt list, results gallery."""

from .app import create_ui

__all__ = ["create_ui"]
