"""
meetingslots - discover open meeting slots on a calendar and book one.
"""

__version__ = "0.1.0"
