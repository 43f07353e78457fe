"""Gradio user interface for Stencil Studio."""
