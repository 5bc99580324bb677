# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, generated by the application)
- username: text (unique, not null)
- password: text (not null) - bcrypt hash, never returned to clients
- created_at: timestamp (not null)
- updated_at: timestamp (not null)
"""
