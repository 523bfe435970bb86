"""Test configuration and shared fixtures for Arborea.

Configuration is redirected to a per-test temporary directory so the suite
never reads or writes the real user configuration.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from arborea.config import ConfigManager
from arborea.core.tree import Tree, new_tree

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the user config directory at a temp folder and reset the singleton."""
    config_dir = tmp_path / "user_config"
    monkeypatch.setenv("ARBOREA_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()


@pytest.fixture
def tree() -> Tree:
    return new_tree()


@pytest.fixture
def sample_tree() -> Tree:
    """Build a small tree used across tests.

    Layout (ids in brackets)::

        Root [0]
        ├── Intro [1]
        │   ├── Scope [2]
        │   │   └── Details [3]
        │   └── Goals [4]
        └── Appendix [5]
    """
    tree = new_tree()
    tree.root.title = "Root"
    intro = tree.root.create_child("Intro", "Welcome")
    scope = intro.create_child("Scope", "What is covered")
    scope.create_child("Details", "Fine print")
    intro.create_child("Goals", "")
    tree.root.create_child("Appendix", "Extra *markdown*")
    return tree


def structure_of(tree: Tree) -> dict:
    """Return ``{id: (title, content, parent_id, child_ids)}`` for comparisons."""
    return {
        node.id: (
            node.title,
            node.content,
            node.parent.id if node.parent is not None else None,
            [child.id for child in node.children],
        )
        for node in tree.nodes
    }


@pytest.fixture
def structure():
    return structure_of
