#!/usr/bin/env python3
"""
Seed the game library with a few sample games
"""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from medialibrary.database import Base, SessionLocal, sync_engine  # noqa: E402
from medialibrary.models import Game, GamePlatform, NextUp, SortPosition  # noqa: E402

SAMPLE_GAMES = [
    {"external_id": "114144", "status": "completed", "platforms": [("pc", "steam")]},
    {"external_id": "10270", "status": "started", "platforms": [("pc", "gog"), ("switch", None)]},
    {"external_id": "38887", "status": "started", "platforms": [("pc", "steam")]},
    {"external_id": "63622", "status": "backlog", "platforms": [("pc", "epic")]},
    {"external_id": "52905", "status": "wishlist", "platforms": [("switch", None)]},
]


def seed():
    """Replace all games with the samples; started games get a custom order"""
    Base.metadata.create_all(sync_engine, checkfirst=True)
    db = SessionLocal()

    try:
        db.query(NextUp).filter(NextUp.media_type == "game").delete()
        db.query(SortPosition).delete()
        db.query(GamePlatform).delete()
        db.query(Game).delete()

        started = []
        for sample in SAMPLE_GAMES:
            game = Game(external_id=sample["external_id"], status=sample["status"])
            db.add(game)
            db.flush()
            for platform, storefront in sample["platforms"]:
                db.add(GamePlatform(game_id=game.id, platform=platform, storefront=storefront))
            if game.status == "started":
                started.append(game.id)

        for position, game_id in enumerate(started):
            db.add(SortPosition(game_id=game_id, position=position))

        db.commit()
        print(f"Seeded {len(SAMPLE_GAMES)} games")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed sample games (deletes all games)")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")

    args = parser.parse_args()
    if not args.yes and input("This deletes every game. Continue? [y/N] ").lower() != "y":
        sys.exit(1)
    seed()
