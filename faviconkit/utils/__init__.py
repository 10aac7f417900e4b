"""Helpers shared by the favicon pipeline."""
