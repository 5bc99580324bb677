# Supabase tables: friends, friend_requests
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Expected Supabase table structure:

friends:
- id: uuid (primary key)
- user1: uuid (foreign key to users.id, not null)
- user2: uuid (foreign key to users.id, not null)
- created_at: timestamp (not null)
- updated_at: timestamp (not null)
One row per friendship; the relation is symmetric, so lookups check both columns.

friend_requests:
- id: uuid (primary key)
- from_user: uuid (foreign key to users.id, not null)
- to_user: uuid (foreign key to users.id, not null)
- status: text (not null) - values: pending, accepted, rejected
- created_at: timestamp (not null)
- updated_at: timestamp (not null)
"""
