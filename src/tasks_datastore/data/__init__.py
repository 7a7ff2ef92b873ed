"""
Data layer.

Components:
- models.py: data structures (Task, TaskPriority, SortOrder, UserPreferences)
- tasks_repository.py: in-memory task source emitting full snapshots
- datastore.py: SQLite-backed key-value preferences store with migrations
- user_preferences.py: typed preferences repository on top of the store
"""
