"""Attendance time & status computation engine.

Feature modules (shifts, breaks, attendance, workdays, settings, backfill) keep
pure resolvers apart from the MySQL repositories and the thin Flask/CLI layer.
"""
