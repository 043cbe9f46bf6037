"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Plan)
- local_storage.py: JSON key-value file used for persistence
- task_store.py: flat task collection + the single day plan
"""
