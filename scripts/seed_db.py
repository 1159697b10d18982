"""
Seed script for the ABHAYA mock DB or Firestore.

Usage:
  - Dry run (default): python scripts/seed_db.py
  - Apply to configured DB: python scripts/seed_db.py --apply
  - Force mock DB even if FIREBASE configured: python scripts/seed_db.py --apply --force-mock
  - Other seed file: python scripts/seed_db.py --seed path/to/seed.json

Behavior:
  - Loads `db_seed.json` from the repo root (or --seed).
  - Gets DB via `abhaya.config.firebase.get_db()` which returns the mock DB or real Firestore depending on settings.
  - Writes each top-level collection/document to the DB.
  - Prints the risk zones the seeded incidents produce.
"""

import argparse
import json
import os
from typing import Any

from abhaya.config.firebase import get_db, reset_db
from abhaya.core.settings import settings
from abhaya.services.dashboard_service import build_risk_zones
from abhaya.utils.firestore_helpers import unresolved_records


def load_seed(path: str = "./db_seed.json") -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_to_db(db: Any, seed: dict, apply: bool = False):
    # db is either MockFirestore or a real firestore client
    for collection, docs in seed.items():
        for doc_id, data in docs.items():
            print(f"Preparing: {collection}/{doc_id}")
            if not apply:
                continue
            try:
                db.collection(collection).document(doc_id).set(data)
                print(f"Wrote: {collection}/{doc_id}")
            except Exception as e:
                print(f"Failed to write {collection}/{doc_id}: {e}")


def preview_risk_zones(seed: dict):
    incidents = [
        data for data in seed.get("incidents", {}).values()
        if not data.get("resolved")
    ]
    for zone in build_risk_zones(incidents):
        print(f"Risk zone ({zone['lat']}, {zone['lng']}): {zone['count']} reports -> {zone['severity']}")


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--apply", action="store_true", help="Write seed to the DB instead of dry-run")
    parser.add_argument("--force-mock", action="store_true", help="Force use of mock DB even if FIREBASE configured")
    parser.add_argument("--seed", default=os.path.join(os.getcwd(), "db_seed.json"), help="Seed JSON file")
    args = parser.parse_args()

    if not os.path.exists(args.seed):
        print(f"Seed file not found: {args.seed}")
        return

    seed = load_seed(args.seed)

    if args.force_mock:
        print("Forcing mock DB usage for this run.")
        settings.USE_MOCK_DB = True
        reset_db()

    db = get_db()

    write_to_db(db, seed, apply=args.apply)
    preview_risk_zones(seed)

    if args.apply:
        print(f"Seeding completed. Unresolved incidents now stored: {len(unresolved_records(db, 'incidents'))}")
    else:
        print("Dry run complete. Re-run with --apply to write to DB.")


if __name__ == "__main__":
    main()
