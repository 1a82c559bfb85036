"""Contribution Tracker storage package.

Tenant-scoped CSV storage (reader, writer, path isolation) and the backup
subsystem built on top of it, with a thin Flask controller layer.
"""
