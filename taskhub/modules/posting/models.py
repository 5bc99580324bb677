# Supabase table: posts
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Expected Supabase table structure:

posts:
- id: uuid (primary key)
- author: uuid (foreign key to users.id, not null) - immutable after creation
- content: text (not null)
- options: jsonb (nullable) - display configuration, see PostOptions
- created_at: timestamp (not null)
- updated_at: timestamp (not null)
"""
