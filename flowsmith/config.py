"""Project configuration loaded from flowsmith.yaml."""

import os
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAME = "flowsmith.yaml"
CONFIG_ENV_VAR = "FLOWSMITH_CONFIG"


class ConfigError(Exception):
    """Raised when the project configuration cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class ProjectConfig(BaseModel):
    """Where workflow models live and where generated code goes."""

    model_config = ConfigDict(extra="forbid")

    workflows_dir: str = "workflows"
    generated_dir: str = "generated"
    implementation_file: str = "workflow_impl.py"
    model_suffix: str = ".flow"

    def model_path(self, snake_name: str) -> Path:
        """Get the model source path for a workflow name."""
        return Path(self.workflows_dir) / f"{snake_name}{self.model_suffix}"


def load_config(path: str | Path | None = None) -> ProjectConfig:
    """Load the project configuration.

    Lookup order: the given path, then ``$FLOWSMITH_CONFIG``, then
    ``flowsmith.yaml`` in the working directory. An explicitly named file
    must exist; a missing default file yields the default configuration.

    Args:
        path: Optional path to the configuration file.

    Returns:
        The validated ProjectConfig.

    Raises:
        ConfigError: If the file cannot be read or is invalid.
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    path = Path(path or os.environ.get(CONFIG_ENV_VAR) or CONFIG_FILE_NAME)

    if not path.exists():
        if explicit:
            raise ConfigError(f"Config file not found: {path}", str(path))
        logger.debug("config_defaults", path=str(path))
        return ProjectConfig()

    if not path.is_file():
        raise ConfigError(f"Not a file: {path}", str(path))

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}", str(path)) from e
    except OSError as e:
        raise ConfigError(f"Cannot read file: {e}", str(path)) from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise ConfigError(
            f"Expected YAML mapping at root, got {type(data).__name__}", str(path)
        )

    try:
        config = ProjectConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid configuration: {problems}", str(path)) from e

    logger.debug("config_loaded", path=str(path))
    return config
