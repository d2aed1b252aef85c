"""YAML configuration for rendering.

A config file holds a ``render:`` section whose keys match ``RenderConfig``
fields:

```yaml
render:
  sample_rate: 48000
  bpm: 96
  normalize: clip
```
"""

import logging
import os
import typing

import yaml

import anacrusis.exceptions
import anacrusis.rendering


logger = logging.getLogger(__name__)

RENDER_KEYS: typing.Tuple[str, ...] = ("sample_rate", "bpm", "gain", "normalize", "reference", "edit_fade")


def load_config (config_path: str = 'anacrusis.yaml') -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		data = yaml.safe_load(f)

	if data is None:
		return {}

	if not isinstance(data, dict):
		raise anacrusis.exceptions.InvalidRenderConfig(f"Config file {config_path} must contain a mapping, got {type(data).__name__}")

	return data


def render_config_from_mapping (config: typing.Mapping[str, typing.Any]) -> anacrusis.rendering.RenderConfig:

	"""
	Build a ``RenderConfig`` from the ``render`` section of a loaded config.

	Missing keys keep their defaults; unknown keys are rejected so typos do not
	pass silently.
	"""

	section = config.get("render") or {}

	if not isinstance(section, dict):
		raise anacrusis.exceptions.InvalidRenderConfig(f"'render' must be a mapping, got {section!r}")

	unknown = sorted(set(section) - set(RENDER_KEYS))

	if unknown:
		raise anacrusis.exceptions.InvalidRenderConfig(f"Unknown render settings: {unknown}")

	return anacrusis.rendering.RenderConfig(**section)


def load_render_config (config_path: str = 'anacrusis.yaml') -> anacrusis.rendering.RenderConfig:

	return render_config_from_mapping(load_config(config_path))
