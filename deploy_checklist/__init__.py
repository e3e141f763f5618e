"""
Deploy Checklist - Source Package

Keeps the staging deploy checklist issue in sync with what is actually
being deployed: merged pull requests, open deploy blockers, and the QA and
accessibility progress recorded by the people working the checklist.

DESIGN PRINCIPLES:
1. Recorded human progress is never reset
2. Parsing fails open, tracker calls fail loudly
3. The checklist body is rendered deterministically
4. Every step of a run is auditable
5. The issue tracker is swappable
"""

__version__ = "1.0.0"
