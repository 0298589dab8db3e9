"""Reviewer Service Package — team, user and pull request tracking with automatic reviewer assignment.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
