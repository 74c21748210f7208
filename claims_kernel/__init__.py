"""
Claims Kernel

Lifecycle kernel for lecturer timesheet claims:
- Submission with HR rate snapshot
- Coordinator review and manager final approval
- Table-driven role and state gating
- Optimistic concurrency on every claim write
- Post-commit notifications
"""

__version__ = "0.1.0"
