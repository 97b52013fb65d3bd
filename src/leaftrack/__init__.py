"""
leaftrack: task trees, actionable leaves and free/busy time.

Subpackages:
- tasks: task tree, leaf extraction, YAML codec, project repository
- schedule: busy time slots, weekly template, free time ledger
- core: clock helpers, ports, application state
- cli: entry point
"""

__version__ = "0.1.0"
