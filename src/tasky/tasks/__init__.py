"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority)
- task_errors.py: error kinds raised by validation and storage
- task_validation.py: field rules checked before a task enters the store
- task_store.py: JSON-file storage with whole-file atomic writes
- task_query.py: filtering and stable sorting of snapshots
- task_api.py: one function per user intent (add, list, update, ...)
"""
