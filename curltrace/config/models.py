from typing import List

import yaml
from pydantic import BaseModel, ConfigDict, Field

from curltrace.common.utils import get_app_dir
from curltrace.config.yaml import load_yaml


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default='INFO', description='Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)')
    console_enabled: bool = Field(default=True, description='Enable console logging')
    file_enabled: bool = Field(default=False, description='Enable file logging')
    log_file_dir: str = Field(default=str(get_app_dir() / 'logs'), description='Log directory (defaults to ~/.curltrace/logs)')
    max_file_size: str = Field(default='10MB', description='Maximum log file size before rotation')
    backup_count: int = Field(default=4, ge=0, description='Number of backup files to keep')


class TraceConfig(BaseModel):
    """Trace capture configuration."""

    model_config = ConfigDict(extra='allow')

    version: str = Field(default='1', description='Config version')
    encoding: str = Field(default='iso-8859-1', description='Encoding used to decode header lines and info text')
    include_ssl_data: bool = Field(default=False, description='Render TLS byte events instead of skipping them')
    dump_dir: str | None = Field(default=None, description='Directory for persisted traces, disabled when unset')
    redact_headers: List[str] | None = Field(default_factory=lambda: ['authorization', 'x-api-key', 'cookie', 'set-cookie'])
    logging: LoggingConfig = Field(default_factory=LoggingConfig, description='Logging configuration')

    @classmethod
    def load(cls, config_path: str | None = None) -> 'TraceConfig':
        """Load configuration from YAML file.

        Tries multiple locations in order:
        1. Explicit config_path if provided
        2. ~/.curltrace/config.yaml in user home directory
        3. ./config.yaml in current directory
        """

        config_paths = []
        if config_path:
            config_paths.append(config_path)
        else:
            home_config = get_app_dir() / 'config.yaml'
            if home_config.exists():
                config_paths.append(str(home_config))
            config_paths.append('config.yaml')

        data = {}
        for path in config_paths:
            try:
                with open(path, 'r') as f:
                    file_data = load_yaml(f) or {}
                    # later files override earlier ones
                    data.update(file_data)
            except FileNotFoundError:
                continue
            except yaml.YAMLError as e:
                raise ValueError(f'Invalid YAML in config file {path}: {e}')
            except OSError as e:
                raise ValueError(f'Error reading config file {path}: {e}')

        return cls(**data)

    def save(self, config_path: str) -> None:
        """Save configuration to YAML file."""
        with open(config_path, 'w') as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False, sort_keys=False, indent=2)
