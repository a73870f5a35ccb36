"""File handle layer.

This module wraps uploaded sources in sanitized handles.
Uploaders and storage engines pass these handles between stages.
"""
