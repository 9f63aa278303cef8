"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskStatus)
- task_store.py: in-memory store with ownership checks; returns Outcomes
"""
