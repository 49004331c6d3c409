"""Staffing hours package.

Feature modules (attendance, work_history, recruitment, ...) sit on top of a
record store gateway and share one time normalizer and one expiring cache.
"""
