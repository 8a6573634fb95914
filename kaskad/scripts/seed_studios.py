"""
Seed Studios Script
Upserts the studios from config and optionally grants superadmin to a profile.
Run after applying kaskad/database/schema.sql:

    python -m kaskad.scripts.seed_studios
    python -m kaskad.scripts.seed_studios --superadmin <user_id>
"""

import argparse
import logging

from kaskad.config.roles_config import SEED_STUDIOS
from kaskad.database.hooks import apply_update
from kaskad.database.supabase_client import SupabaseClient
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_studios(supabase: Client, studios=None):
    """Create missing seed studios, refresh the columns of existing ones"""
    logger.info("Seeding studios...")

    created_count = 0
    updated_count = 0

    for studio in studios if studios is not None else SEED_STUDIOS:
        try:
            existing = supabase.table("studios")\
                .select("id, updated_at")\
                .eq("id", studio["id"])\
                .execute()

            if existing.data:
                values = {k: v for k, v in studio.items() if k != "id"}
                apply_update(supabase, "studios", existing.data[0], values)
                updated_count += 1
                logger.debug(f"Updated studio: {studio['name']}")
            else:
                supabase.table("studios").insert(studio).execute()
                created_count += 1
                logger.debug(f"Created studio: {studio['name']}")
        except Exception as e:
            logger.error(f"Error processing studio {studio['name']}: {e}")

    logger.info(f"Studios seeded: {created_count} created, {updated_count} updated")
    return created_count + updated_count


def grant_superadmin(supabase: Client, user_id: str, enabled: bool = True) -> bool:
    """Set is_superadmin (and the matching role) on an existing profile"""
    existing = supabase.table("profiles")\
        .select("id, role, updated_at")\
        .eq("id", user_id)\
        .execute()
    if not existing.data:
        logger.error(f"No profile for user {user_id}; the user must create a profile first")
        return False

    profile = existing.data[0]
    values = {"is_superadmin": enabled}
    if enabled:
        values["role"] = "superadmin"
    elif profile.get("role") == "superadmin":
        values["role"] = "admin"
    apply_update(supabase, "profiles", profile, values)
    logger.info(f"Superadmin {'granted to' if enabled else 'revoked from'} {user_id}")
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(description="Seed studios and manage superadmins")
    parser.add_argument("--superadmin", metavar="USER_ID", help="grant superadmin to this profile")
    parser.add_argument("--revoke", action="store_true", help="revoke instead of grant")
    parser.add_argument("--skip-studios", action="store_true", help="do not seed studios")
    args = parser.parse_args(argv)

    supabase = SupabaseClient.get_service_client()
    if not args.skip_studios:
        seed_studios(supabase)
    if args.superadmin:
        if not grant_superadmin(supabase, args.superadmin, enabled=not args.revoke):
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
