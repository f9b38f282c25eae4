"""
GraphQL Request Context
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import strawberry
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import BaseContext

from marketplace.config import Settings, get_settings
from marketplace.database.connection import Database


class GraphQLContext(BaseContext):
    """Per-request context carrying the database handle and settings"""

    def __init__(self, database: Database, settings: Settings):
        super().__init__()
        self.database = database
        self.settings = settings


async def get_context(request: Request) -> GraphQLContext:
    """FastAPI dependency building the context from application state."""
    return GraphQLContext(database=request.app.state.database, settings=get_settings())


@asynccontextmanager
async def db_session(info: strawberry.Info) -> AsyncGenerator[AsyncSession, None]:
    """Scoped session for one resolver call."""
    async with info.context.database.session() as session:
        yield session
