import pytest

from collapsibletree.config import Margin, TreeConfig


def test_defaults():
    config = TreeConfig()
    assert config.node_size == (25.0, 200.0)
    assert config.margin == Margin(top=10, right=120, bottom=10, left=40)
    assert config.duration_ms == 250
    assert (config.sibling_separation, config.cousin_separation) == (2.0, 3.0)
    assert config.initial_depth == 1


def test_from_env():
    config = TreeConfig.from_env(
        {
            "COLLAPSIBLE_TREE_WIDTH": "800",
            "COLLAPSIBLE_TREE_DURATION_MS": "500",
            "COLLAPSIBLE_TREE_FPS": "30",
            "COLLAPSIBLE_TREE_INITIAL_DEPTH": "all",
            "COLLAPSIBLE_TREE_REALTIME": "false",
            "COLLAPSIBLE_TREE_REENTRANT_POLICY": "ignore",
            "UNRELATED": "1",
        }
    )
    assert config.width == 800.0
    assert config.node_size[0] == 40.0
    assert config.duration_ms == 500.0
    assert config.fps == 30
    assert config.initial_depth is None
    assert config.realtime is False
    assert config.reentrant_policy == "ignore"


def test_from_env_without_overrides():
    assert TreeConfig.from_env({}) == TreeConfig()


@pytest.mark.parametrize(
    "overrides",
    [
        {"reentrant_policy": "cancel"},
        {"duration_ms": -1},
        {"fps": 0},
        {"initial_depth": 0},
    ],
)
def test_invalid_values(overrides):
    with pytest.raises(ValueError):
        TreeConfig(**overrides)


def test_with_overrides_keeps_other_fields():
    config = TreeConfig(width=300).with_overrides(realtime=False)
    assert config.width == 300
    assert config.realtime is False
