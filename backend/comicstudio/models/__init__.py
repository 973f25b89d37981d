"""
Comic Studio Backend — ORM Models
===================================

Importing this package registers every table on Base.metadata (Alembic
autogenerate and the test suite's create_all rely on that).
"""

from comicstudio.models.user import User
from comicstudio.models.series import Series
from comicstudio.models.chapter import Chapter

__all__ = ["User", "Series", "Chapter"]
