"""cmdflow - named command pipelines for an interactive development tool."""

from .binder import ProjectContext, bind
from .command import CommandDefinition, ProcessStep
from .executor import CommandExecutor, CommandRun, StepResult
from .prompts import PromptCoordinator
from .registry import CommandRegistry, filter_command_names, merge_commands

__version__ = "0.1.0"

__all__ = [
    "CommandDefinition",
    "CommandExecutor",
    "CommandRegistry",
    "CommandRun",
    "ProcessStep",
    "ProjectContext",
    "PromptCoordinator",
    "StepResult",
    "bind",
    "filter_command_names",
    "merge_commands",
]
