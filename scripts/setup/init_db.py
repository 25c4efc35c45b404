# scripts/setup/init_db.py
"""
Initialize the local database — creates the device-local settings table.
Optionally stores this device's display name so the name dialog is skipped.
Usage: python scripts/setup/init_db.py [--name Aswin]
"""

import argparse
import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", ".."))

from app.database import create_tables, engine, SessionLocal
from app.config import settings
from app.services.identity_service import IdentityStore
from sqlalchemy import inspect, text


def main():
    parser = argparse.ArgumentParser(description="Prepare the local parking board database")
    parser.add_argument("--name", help="Display name to park under on this device")
    args = parser.parse_args()

    print("🗄️  Parking Board DB Initialization")
    print("=" * 40)
    print(f"📡 Database: {settings.DATABASE_URL}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        print("✅ Database connection OK")
    except Exception as e:
        print(f"❌ Cannot open database: {e}")
        sys.exit(1)

    print("\n📋 Creating tables...")
    create_tables()
    tables = inspect(engine).get_table_names()
    for t in tables:
        print(f"   ✓ {t}")

    identity = IdentityStore(SessionLocal)
    if args.name:
        saved = identity.save(args.name)
        print(f"\n👤 Display name: {saved}" if saved else "\n⚠️  Blank name ignored")
    else:
        current = identity.load()
        print(f"\n👤 Display name: {current or '(not set — the board will ask)'}")

    print(f"\n🔥 Realtime sync: {'enabled' if settings.firebase_enabled else 'disabled (local mode)'}")
    print("\n🎉 Ready! Start the board:")
    print("   uvicorn app.main:app --host 0.0.0.0 --port 8080 --reload")


if __name__ == "__main__":
    main()
