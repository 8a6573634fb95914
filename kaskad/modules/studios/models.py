# Supabase table: studios
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (see kaskad/database/schema.sql):

studios:
- id: uuid (primary key, default: uuid_generate_v4()) - never updated
- name: text (not null)
- description: text (nullable)
- address: text (nullable)
- phone: text (nullable)
- email: text (nullable)
- website: text (nullable)
- subscription_plan: text (default: 'free') - values: free, basic, premium
- active: boolean (not null, default: true) - inactive studios are hidden from their members
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), refreshed on every update)

Referenced by profiles.studio_id (ON DELETE SET NULL) and
gallery_items.studio_id (ON DELETE CASCADE).
"""
