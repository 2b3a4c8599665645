"""
Tempo Planner - task tracking with productivity scoring and prioritization.
"""

__version__ = "1.0.0"
