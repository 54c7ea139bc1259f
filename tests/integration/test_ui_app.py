"""Integration tests for building the Gradio composer app."""

from __future__ import annotations

import gradio as gr

from promptgate.core.config import ComposerConfig
from promptgate.ui.app import create_ui
from promptgate.ui.composer import PromptComposer


def test_create_ui_returns_blocks():
    """The composer layout builds without launching a server."""
    config = ComposerConfig(_env_file=None)
    with PromptComposer(config.gateway_url) as composer:
        app = create_ui(config, composer=composer)
    assert isinstance(app, gr.Blocks)


def test_create_ui_builds_default_composer():
    """Without an explicit composer, one is created from the config."""
    config = ComposerConfig(gateway_url="http://gw.test/api/generate", _env_file=None)
    app = create_ui(config)
    assert isinstance(app, gr.Blocks)
