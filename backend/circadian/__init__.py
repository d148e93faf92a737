"""Circadian task-scheduling service."""
