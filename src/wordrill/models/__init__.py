"""Persistence models and domain records."""
