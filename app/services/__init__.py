"""Profiling pipeline services."""
