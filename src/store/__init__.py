"""Storage layer.

This module commits cached files to local disk or S3.
It powers store, retrieve, and remove for every uploader in a version tree.
"""
