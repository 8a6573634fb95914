# Supabase table: gallery_items
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure (see kaskad/database/schema.sql):

gallery_items:
- id: uuid (primary key, default: uuid_generate_v4())
- studio_id: uuid (references studios.id ON DELETE CASCADE)
- title: text (not null)
- description: text (nullable)
- media_url: text (not null)
- media_type: text (not null) - values: photo, video
- category: text (nullable)
- tags: text[] (nullable)
- is_public: boolean (default: false) - public items are readable without signing in
- likes_count: integer (default: 0)
- created_by: uuid (references profiles.id) - set from the caller on insert
- created_at: timestamptz (default: now())
- updated_at: timestamptz (default: now(), refreshed on every update)

Indexes on studio_id and created_at DESC (the default listing order).
"""
