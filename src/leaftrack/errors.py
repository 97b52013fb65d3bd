# src/leaftrack/errors.py

from __future__ import annotations


class LeaftrackError(Exception):
    """Base class for all leaftrack errors."""


class ConfigError(LeaftrackError, ValueError):
    """Structured configuration is malformed. Loading is aborted as a whole."""


class BusyTemplateError(ConfigError):
    """The weekly busy-time template could not be parsed."""


class ContractViolation(LeaftrackError, RuntimeError):
    """
    A caller broke a precondition of the core.

    These are programming errors: library code never catches them.
    """


class HierarchyCycleError(ContractViolation):
    """A reattachment would make a task its own ancestor."""


class CrossDayRegistrationError(ContractViolation):
    """A busy slot was registered with start and end on different dates."""


class ProjectLoadError(LeaftrackError):
    """A project file exists but is not valid YAML."""
