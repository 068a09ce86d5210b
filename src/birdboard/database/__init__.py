"""Database package for Birdboard.

Database components should be imported directly from their modules:
from birdboard.database.core import DatabaseService
"""
