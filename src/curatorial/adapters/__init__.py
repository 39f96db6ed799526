"""Adapters connecting the resolution engine to files, snapshots and HTTP."""
