"""
Timetable subsystem.

Components:
- schedule_models.py: slot coordinates, assignments, interaction modes, stored shape
- schedule_store.py: the 6x5 grid and the mode-dependent slot activation
"""
