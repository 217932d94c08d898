"""Shared fixtures for agent-segmenter tests."""

import logging
import os

import pytest
import yaml

from agent_segmenter import config as config_module
from agent_segmenter.display import set_use_unicode


@pytest.fixture
def tmp_dir(tmp_path):
    """Provide a temporary directory and cd into it."""
    orig = os.getcwd()
    os.chdir(tmp_path)
    yield tmp_path
    os.chdir(orig)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the user's global config and SEGMENTER_* env vars out of tests."""
    home = tmp_path / "home"
    monkeypatch.setattr(config_module, "CONFIG_DIR", home)
    monkeypatch.setattr(config_module, "CONFIG_FILE", home / "config.yml")
    for var in list(os.environ):
        if var.startswith("SEGMENTER_"):
            monkeypatch.delenv(var)
    yield
    set_use_unicode(True)
    # CLI runs attach handlers to the package logger; drop them between tests
    logger = logging.getLogger("agent_segmenter")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def sample_config_data():
    """Minimal .segmenter.yml data dict."""
    return {
        "output-format": "json",
        "use-unicode": False,
        "verbose": False,
        "log-file": False,
        "chunk-size": 16,
        "incremental": True,
    }


@pytest.fixture
def config_yaml_file(tmp_dir, sample_config_data):
    """Write a config YAML to tmp_dir and return its Path."""
    path = tmp_dir / ".segmenter.yml"
    with open(path, "w") as f:
        yaml.dump(sample_config_data, f, default_flow_style=False)
    return path


@pytest.fixture
def agent_transcript():
    """A message shaped like the backend's tool-use stream output."""
    return (
        "我来帮你创建一个计数器组件。\n"
        "\n\n[选择工具] 写入文件\n\n"
        "\n\n[工具调用] 写入文件 src/components/Counter.vue\n"
        "```vue\n"
        "<template>\n"
        "  <button @click=\"count++\">{{ count }}</button>\n"
        "</template>\n"
        "```\n"
        "\n\n"
        "**执行结果**: 文件写入成功: src/components/Counter.vue\n"
        "\n\n[选择工具] 读取文件\n\n"
        "组件已创建，接下来检查入口文件。"
    )
