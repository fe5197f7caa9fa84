"""Renderer package for displaying command results."""

from qbo_query.renderers.envelope import emit_failure, emit_success, render_envelope

__all__ = ["emit_failure", "emit_success", "render_envelope"]
