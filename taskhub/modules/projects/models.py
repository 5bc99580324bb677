# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- name: text (unique, not null)
- creator: uuid (foreign key to users.id, not null) - the project manager
- created_at: timestamp (not null)
- updated_at: timestamp (not null)

Membership lives in project_members (see modules/grouping) and tasks in
tasks (see modules/tasking); both are removed by the route layer before the
project row itself.
"""
