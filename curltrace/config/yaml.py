"""Config file loading with an ``!env`` tag.

``dump_dir: !env TRACE_DIR`` requires the variable to be set;
``encoding: !env [TRACE_ENCODING, utf-8]`` falls back to the default.
"""

from __future__ import annotations

import os
from typing import Any

import yaml


class EnvLoader(yaml.SafeLoader):
    """SafeLoader that resolves !env tags; registered on a subclass so plain yaml.safe_load is untouched."""


def _construct_env(loader: EnvLoader, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        var_name = loader.construct_scalar(node)
        if var_name not in os.environ:
            raise ValueError(f"Required environment variable '{var_name}' is not set")
        return os.environ[var_name]

    if isinstance(node, yaml.SequenceNode):
        values = loader.construct_sequence(node)
        if len(values) == 2 and isinstance(values[0], str):
            return os.environ.get(values[0], values[1])

    raise yaml.constructor.ConstructorError(None, None, '!env expects VAR or [VAR, default]', node.start_mark)


EnvLoader.add_constructor('!env', _construct_env)


def load_yaml(stream) -> Any:
    return yaml.load(stream, Loader=EnvLoader)


__all__ = ['EnvLoader', 'load_yaml']
