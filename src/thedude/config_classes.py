"""Dude configuration data, usually stored in thedude.toml"""

from dataclasses import dataclass

from .exceptions import ConfigError
from .tasks import CallStyle

# Constants
DEFAULT_TASKLIST_NAME = "tasks"


@dataclass
class TaskListConfig:
    name: str = DEFAULT_TASKLIST_NAME
    # Default call style of the tasks created by TaskList.lazy
    call_style: CallStyle = CallStyle.AUTO

    def __post_init__(self):
        try:
            self.call_style = CallStyle(self.call_style)
        except ValueError:
            choices = " | ".join(style.value for style in CallStyle)
            raise ConfigError(
                f"Unknown call style `{self.call_style}'", f"Use one of: {choices}"
            )


@dataclass(frozen=True)
class LoggingConfig:
    verbose: bool = False
    very_verbose: bool = False
