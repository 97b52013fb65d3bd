"""
Free/busy time.

Components:
- busy_time_slot.py: recurring busy interval types
- busy_template.py: strict parser for the weekly busy-time template
- free_time_manager.py: per-date minute ledger of free/busy time
"""
