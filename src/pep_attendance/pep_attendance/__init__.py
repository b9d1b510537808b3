"""PEP Attendance package.

This package is organized by feature modules (ingest, terms, weekly, cache, ...)
with a thin Flask controller layer on top of the snapshot cache service.
"""
