"""
Core business logic for UniPlace.

Submodules:
- eligibility: Branch taxonomy and eligibility evaluation
- lifecycle: Application submission, status changes, posting closure
- notifications: Fire-and-forget notification dispatch
"""
