"""Apply SQL migrations from ``backend/migrations``.

Usage: python scripts/apply_migration.py [migration_filename ...]
Without arguments every ``*.sql`` file is applied in name order.
"""

import asyncio
import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from bubbly.infra.postgres import close_pool, get_pool  # noqa: E402

MIGRATIONS_DIR = BACKEND_ROOT / "migrations"


def resolve(names):
    if not names:
        return sorted(MIGRATIONS_DIR.glob("*.sql"))
    return [MIGRATIONS_DIR / name for name in names]


async def apply_migration(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundError(f"Migration file not found: {path}")
    print(f"Applying migration: {path.name}")
    sql = path.read_text(encoding="utf-8")
    pool = await get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            await conn.execute(sql)
    print("Migration applied successfully.")


async def main(names) -> None:
    try:
        for path in resolve(names):
            await apply_migration(path)
    finally:
        await close_pool()


if __name__ == "__main__":
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())
    asyncio.run(main(sys.argv[1:]))
