from pathlib import Path

import pytest

from bitpm.config import (
    BitConfig,
    ConfigLoader,
    ConsumerBitConfig,
    load_bit_config,
    load_consumer_config,
    write_bit_config,
)

from .stubs import COMPILER_ID


@pytest.fixture
def user_dir(tmp_path, monkeypatch):
    user_dir = tmp_path / "home" / ".bitpm"
    monkeypatch.setattr(ConfigLoader, "USER_CONFIG_DIR", user_dir)
    return user_dir


def test_defaults_without_config(tmp_path, user_dir):
    config = load_consumer_config(tmp_path)

    assert config.impl_file == "impl.js"
    assert config.compiler_id is None
    assert config.tester_id is None


def test_project_config_wins_over_user_config(tmp_path, user_dir):
    user_dir.mkdir(parents=True)
    (user_dir / "bit.yaml").write_text("impl_file: user.js\n")
    (tmp_path / "bit.yaml").write_text("impl_file: project.js\ncompiler: plugins/envs/babel@2\n")

    config = load_consumer_config(tmp_path)

    assert config.impl_file == "project.js"
    assert config.compiler_id == COMPILER_ID


def test_user_config_is_used_as_fallback(tmp_path, user_dir):
    user_dir.mkdir(parents=True)
    (user_dir / "bit.yaml").write_text("impl_file: user.js\n")

    assert load_consumer_config(tmp_path).impl_file == "user.js"


def test_malformed_consumer_config_falls_back_to_defaults(tmp_path, user_dir):
    (tmp_path / "bit.yaml").write_text("impl_file: [unclosed\n")

    assert load_consumer_config(tmp_path) == ConsumerBitConfig()


def test_save_and_reload(tmp_path, user_dir):
    loader = ConfigLoader(tmp_path)
    path = loader.save(ConsumerBitConfig(tester="plugins/envs/mocha@1"))

    assert path == tmp_path / "bit.yaml"
    assert loader.load().tester == "plugins/envs/mocha@1"


def test_save_user_level(tmp_path, user_dir):
    path = ConfigLoader(tmp_path).save(ConsumerBitConfig(), user_level=True)

    assert path == user_dir / "bit.yaml"


def test_component_config_overrides_consumer_defaults(tmp_path):
    (tmp_path / "bit.yaml").write_text("spec_file: test.js\nversion: 2\n")
    consumer = ConsumerBitConfig(impl_file="index.js", spec_file="spec.js")

    config = load_bit_config(tmp_path, consumer)

    assert config.impl_file == "index.js"
    assert config.spec_file == "test.js"
    assert config.version == 2


def test_write_bit_config_respects_override(tmp_path):
    write_bit_config(BitConfig(version=1), tmp_path)

    assert write_bit_config(BitConfig(version=2), tmp_path, override=False) is None
    assert load_bit_config(tmp_path).version == 1

    assert write_bit_config(BitConfig(version=2), tmp_path, override=True) == Path(tmp_path) / "bit.yaml"
    assert load_bit_config(tmp_path).version == 2
