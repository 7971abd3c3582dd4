"""
Task/reward tracker backend.

Per-user tasks, rewards and running state persisted through one of two
interchangeable storage backends (JSON documents on disk or a relational
database), exposed over a small FastAPI service.
"""
