"""Shared helpers for autolens."""
