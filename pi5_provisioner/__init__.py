"""Raspberry Pi 5 provisioner (staged, resumable).

Core design goals:
- One stage per invocation, resumed from a persisted cursor
- Stages are safe to re-run after a failure or interruption
- Reboots and re-logins are explicit advance policies
- Centralized logging
"""

__all__ = []
