# Supabase table: tasks
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Expected Supabase table structure:

tasks:
- id: uuid (primary key)
- description: text (not null)
- project: uuid (foreign key to projects.id, not null)
- assignee: uuid (foreign key to users.id, nullable) - NULL when unassigned
- completion: boolean (not null, default: false)
- created_at: timestamp (not null)
- updated_at: timestamp (not null)

Every user assigned to a task also has a row in task_assignees; assignee holds
the most recent one.
"""
