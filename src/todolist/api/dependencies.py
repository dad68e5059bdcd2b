"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from todolist.core.database import Database, get_database, get_db


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db)]

# Type alias for the application's database handle
DatabaseHandle = Annotated[Database, Depends(get_database)]
