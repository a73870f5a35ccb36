"""Uploader lifecycle and version engine.

This module caches, processes, stores, and removes an uploaded file
together with its tree of named versions.
"""
