"""Checkpointed, resumable project provisioning.

Core design goals:
- Ordered, numbered steps with a persisted checkpoint
- Re-running resumes after the last completed step
- First failure stops the run; nothing is rolled back
- One project id per run, saved between runs
- Centralized logging
"""

__all__ = []
