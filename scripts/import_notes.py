#!/usr/bin/env python3
"""
Bulk import notes from a JSON file.

Each entry is an object with ``title`` and optionally ``body``,
``created_by_user_id`` and ``updated_by_user_id``. Stamping is switched off
for the import so the ids in the file are kept as-is.

Usage:
    # Dry run (validate and count only)
    python scripts/import_notes.py notes.json --dry-run

    # Import, keeping the authorship recorded in the file
    python scripts/import_notes.py notes.json

    # Import, attributing every note to one user instead
    python scripts/import_notes.py notes.json --as-user user_123
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.ext.asyncio import AsyncSession

from core.accountable import accountable_scope
from core.database import async_session_factory
from models.note import Note
from models.user import User

logger = logging.getLogger(__name__)

IMPORTED_FIELDS = ("title", "body", "created_by_user_id", "updated_by_user_id")


async def import_notes(db: AsyncSession, rows: list[dict], as_user: Optional[User] = None) -> list[Note]:
    """
    Insert ``rows`` as notes and commit.

    Without ``as_user`` stamping is disabled and the file's authorship wins.
    With ``as_user`` the notes are stamped as if that user had written them.
    """
    with accountable_scope(session=db) as context:
        if as_user is None:
            context.disable()
        else:
            context.act_as(as_user)

        notes = [Note(**{key: row.get(key) for key in IMPORTED_FIELDS if key in row}) for row in rows]
        db.add_all(notes)
        await db.commit()

    return notes


async def main(path: Path, as_user_id: Optional[str] = None, dry_run: bool = True) -> None:
    """Main import function."""
    rows = json.loads(path.read_text())
    missing_title = [i for i, row in enumerate(rows) if not row.get("title")]
    if missing_title:
        logger.error("Entries without a title: %s", missing_title)
        return

    logger.info("Read %d note(s) from %s", len(rows), path)
    if dry_run:
        logger.info("Dry run mode - nothing imported.")
        return

    async with async_session_factory() as db:
        as_user = None
        if as_user_id:
            as_user = await db.get(User, as_user_id)
            if as_user is None:
                logger.error("User %s not found", as_user_id)
                return

        notes = await import_notes(db, rows, as_user=as_user)
        logger.info("Imported %d note(s).", len(notes))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    parser = argparse.ArgumentParser(description="Bulk import notes")
    parser.add_argument("path", type=Path, help="JSON file with a list of notes")
    parser.add_argument("--as-user", help="Attribute every note to this user id")
    parser.add_argument("--dry-run", action="store_true", help="Validate only")
    args = parser.parse_args()

    asyncio.run(main(args.path, as_user_id=args.as_user, dry_run=args.dry_run))
