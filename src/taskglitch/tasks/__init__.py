"""
Task subsystem.

Components:
- task_models.py: data structures (Task, DerivedTask, Metrics, Priority, TaskStatus)
- normalize.py: raw record -> Task coercion
- metrics.py: ROI and aggregate metrics
- ranking.py: display order
- task_store.py: in-memory store with a single undo slot
- filters.py: title/status/priority filter
- seed.py: synthetic sales tasks
- task_loader.py: one-shot initial load
"""
