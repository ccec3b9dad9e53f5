"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus) and wire conversion
- task_store.py: SQLite-backed storage with the five CRUD operations
"""
