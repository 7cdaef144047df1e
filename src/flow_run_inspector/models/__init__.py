"""Typed models for flow definitions and flow run results."""
