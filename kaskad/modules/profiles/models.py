# Supabase tables: profiles, auth.users
# Supabase view: profiles_with_studio
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (see kaskad/database/schema.sql):

profiles:
- id: uuid (primary key, references auth.users.id ON DELETE CASCADE)
- studio_id: uuid (nullable, references studios.id ON DELETE SET NULL)
- email: text (not null)
- full_name: text (not null)
- phone: text (nullable)
- avatar_url: text (nullable)
- role: text (not null, default: 'child') - values: superadmin, admin, teacher, parent, child
- is_superadmin: boolean (not null, default: false) - set by kaskad/scripts/seed_studios.py only
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), refreshed on every update)

Indexes on studio_id, role and email.

profiles_with_studio (view):
- every profiles column
- studio_name: text (nullable)
- studio_description: text (nullable)
"""
