"""Platform layer: the only place shtools touches external processes."""

from shtools.platform.system_adapter import CommandResult, ISystemAdapter

__all__ = ['CommandResult', 'ISystemAdapter']
