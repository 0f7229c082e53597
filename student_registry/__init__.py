"""
Student registration backend: legacy data-access layer for Oracle / SQL Server student records.
"""

__version__ = "1.0.0"
