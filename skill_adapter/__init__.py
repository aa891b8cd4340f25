"""Adapter between the voice platform's speechlet callbacks and Concept Map services."""
