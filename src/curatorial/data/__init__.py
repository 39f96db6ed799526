"""Precompiled lookup snapshots."""
