"""Persistence layer: declarative base and database sessions."""

from med1.storage.db import Database, db
from med1.storage.models import Base

__all__ = ["Base", "Database", "db"]
