"""Adaptive vocabulary drill backend."""
