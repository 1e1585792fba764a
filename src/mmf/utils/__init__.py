"""Shared utilities for MMF."""
