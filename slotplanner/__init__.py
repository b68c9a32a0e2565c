"""
slotplanner - Availability Scheduling Engine
=============================================

Turns a calendar of busy intervals and a goal ("study 10 hours before
Friday", "gym 3x per week") or an ad-hoc request ("30 minutes tomorrow
afternoon") into concrete, non-overlapping time slots.

Modules:
- core: Configuration, logging, error messages
- scheduling: Free/busy search, session planning, recurrence rules
- tools: Calendar collaborator boundary (Google Calendar JSON in/out)
"""

__version__ = "1.0.0"
__author__ = "slotplanner Project"
