from fastapi import Request


async def get_db(request: Request):
    """Request-scoped session from the database handle the app was built with."""
    database = request.app.state.database
    async with database.sessionmaker() as db:
        try:
            yield db
        finally:
            await db.close()
