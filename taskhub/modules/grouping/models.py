# Supabase tables: project_members, task_assignees
# This file documents the expected database schema
# Actual operations are handled via DocCollection in service.py

"""
Both tables share one shape and are served by GroupItemService:

project_members / task_assignees:
- id: uuid (primary key)
- group: uuid (not null) - project id (project_members) or task id (task_assignees)
- item: uuid (foreign key to users.id, not null)
- created_at: timestamp (not null)
- updated_at: timestamp (not null)

No unique constraint on (group, item): a pair may be inserted twice.
"""
