import logging
import os

import pytest

import anacrusis.config
import anacrusis.exceptions
import anacrusis.rendering


def test_missing_file_uses_defaults (tmp_path, caplog) -> None:

	"""A missing config file logs a warning and yields defaults."""

	path = os.path.join(str(tmp_path), "missing.yaml")

	with caplog.at_level(logging.WARNING, logger="anacrusis.config"):
		config = anacrusis.config.load_config(path)

	assert config == {}
	assert "not found" in caplog.text
	assert anacrusis.config.load_render_config(path) == anacrusis.rendering.RenderConfig()


def test_render_section_is_applied (tmp_path) -> None:

	"""Keys under render: override RenderConfig defaults."""

	path = tmp_path / "anacrusis.yaml"
	path.write_text("render:\n  sample_rate: 48000\n  bpm: 96\n  normalize: clip\n")

	config = anacrusis.config.load_render_config(str(path))

	assert config.sample_rate == 48000
	assert config.bpm == 96
	assert config.normalize == "clip"
	assert config.gain == 1.0


def test_empty_file_uses_defaults (tmp_path) -> None:

	"""An empty YAML document is treated as no settings."""

	path = tmp_path / "empty.yaml"
	path.write_text("")

	assert anacrusis.config.load_config(str(path)) == {}


def test_unknown_key_rejected () -> None:

	"""Typos in the render section are reported."""

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.config.render_config_from_mapping({"render": {"sample_rte": 22050}})


def test_invalid_value_rejected () -> None:

	"""Values are validated by RenderConfig."""

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.config.render_config_from_mapping({"render": {"sample_rate": 0}})


def test_non_mapping_document_rejected (tmp_path) -> None:

	"""The top level of the file must be a mapping."""

	path = tmp_path / "list.yaml"
	path.write_text("- 1\n- 2\n")

	with pytest.raises(anacrusis.exceptions.InvalidRenderConfig):
		anacrusis.config.load_config(str(path))
