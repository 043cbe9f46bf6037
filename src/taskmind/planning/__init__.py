"""
Model-facing helpers.

- extraction.py: raw model text -> bounded list of subtask titles
- breakdown.py: breakdown prompt + call
- day_plan.py: day plan prompt (local time context) + call
"""
