"""Offline knowledge-base maintenance scripts."""
