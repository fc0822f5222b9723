"""
Task subsystem.

Components:
- task_models.py: data structures (Task, TaskListName, capacities) and stored shape
- task_store.py: the two capacity-bounded lists + transfer between them
- drag.py: drag gesture state machine on top of transfer_task()
"""
