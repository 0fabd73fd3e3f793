#!/usr/bin/env python3
"""Seed demo restaurants, menus and staff accounts.

Pass ``--reset`` to drop and recreate every table before seeding.
"""

from __future__ import annotations

import argparse
import asyncio
import json

from api.app import db as app_db
from api.app.models import Base
from api.app.seed import seed


async def main(reset: bool) -> None:
    engine = app_db.init_engine()
    if reset:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    await app_db.create_all()
    async with app_db.get_sessionmaker()() as session:
        data = await seed(session)
    await app_db.dispose()
    print(json.dumps(data))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed demo marketplace data")
    parser.add_argument(
        "--reset", action="store_true", help="Drop all tables before seeding"
    )
    args = parser.parse_args()
    asyncio.run(main(args.reset))
