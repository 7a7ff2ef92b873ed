"""
Task list with persisted sort/filter preferences.

Packages:
- data: task source, key-value preferences store, typed preferences repository
- core: reactive primitives and ports
- ui: derived view model and lifecycle-aware observation
- cli: console front end
"""
