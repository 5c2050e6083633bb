"""
UniPlace - campus placement eligibility and application lifecycle engine.

Decides whether a student may apply to a posting, tracks each application
from submission to resolution, and notifies the people involved.
"""

__app_name__ = "UniPlace"
__version__ = "0.1.0"
