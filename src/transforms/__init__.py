"""Processing pipeline.

This module runs registered processing steps over cached files.
How bytes are transformed is left to the steps themselves.
"""
