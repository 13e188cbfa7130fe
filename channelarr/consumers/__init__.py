"""Consumers of the core types: schedule generation."""
