"""Shared helpers for rstgen."""
