import pytest

from arborea.core.exceptions import (
    CycleError,
    InvalidArgumentError,
    NodeHasChildrenError,
    NotAChildError,
)
from arborea.core.tree import load_tree, new_tree


def _chain(tree, depth):
    """Attach ``depth`` nodes below the root, each the child of the previous one."""
    nodes = []
    parent = tree.root
    for level in range(depth):
        parent = parent.create_child(f"Level {level + 1}")
        nodes.append(parent)
    return nodes


class TestAppendChild:

    def test_returns_receiver_for_chaining(self, tree):
        a = tree.create_node("A")
        b = tree.create_node("B")

        assert tree.root.append_child(a).append_child(b) is tree.root
        assert tree.root.children == (a, b)
        assert a.parent is tree.root and b.parent is tree.root

    @pytest.mark.parametrize("value", [None, 1, "node", {"id": 1}])
    def test_rejects_non_nodes(self, tree, value):
        with pytest.raises(InvalidArgumentError):
            tree.root.append_child(value)

    def test_rejects_node_of_another_tree(self, tree):
        foreign = new_tree().create_node("Foreign")
        with pytest.raises(InvalidArgumentError):
            tree.root.append_child(foreign)
        assert foreign.parent is None

    def test_rejects_itself(self, tree):
        node = tree.root.create_child("A")
        with pytest.raises(CycleError):
            node.append_child(node)
        with pytest.raises(CycleError):
            tree.root.append_child(tree.root)

    @pytest.mark.parametrize("depth", [1, 2, 3])
    def test_rejects_every_ancestor(self, tree, depth):
        chain = _chain(tree, depth)
        deepest = chain[-1]
        before = tree.export()

        for ancestor in [tree.root, *chain[:-1]]:
            with pytest.raises(CycleError):
                deepest.append_child(ancestor)

        assert tree.export() == before

    def test_rejects_root_below_an_orphan(self, tree):
        orphan = tree.create_node("Loose")
        before = tree.export()

        with pytest.raises(CycleError):
            orphan.append_child(tree.root)

        assert tree.root.parent is None
        assert orphan.children == ()
        assert tree.export() == before
        assert load_tree(tree.export()).root.parent is None

    def test_rejects_ancestor_of_detached_subtree(self, tree):
        top, middle, bottom = _chain(tree, 3)
        tree.root.remove_child(top)

        with pytest.raises(CycleError):
            bottom.append_child(top)
        assert middle.parent is top

    def test_reparenting_moves_node_exactly_once(self, sample_tree):
        scope = sample_tree.lookup(2)
        intro = sample_tree.lookup(1)
        appendix = sample_tree.lookup(5)
        count = len(sample_tree)

        appendix.append_child(scope)

        assert scope.parent is appendix
        assert list(intro.children).count(scope) == 0
        assert list(appendix.children).count(scope) == 1
        assert len(sample_tree) == count
        assert [child.id for child in scope.children] == [3]

    def test_appending_existing_child_moves_it_last(self, sample_tree):
        root = sample_tree.root
        intro = sample_tree.lookup(1)

        root.append_child(intro)

        assert [child.id for child in root.children] == [5, 1]

    def test_orphan_can_be_attached(self, tree):
        orphan = tree.create_node("Loose")
        tree.root.append_child(orphan)
        assert tree.find_orphans() == []


class TestRemoveChild:

    def test_leaves_an_orphan_in_the_tree(self, sample_tree):
        appendix = sample_tree.lookup(5)

        assert sample_tree.root.remove_child(appendix) is None

        assert appendix.parent is None
        assert appendix in sample_tree
        assert appendix.is_orphan is True
        assert sample_tree.find_orphans() == [appendix]
        assert [child.id for child in sample_tree.root.children] == [1]

    def test_rejects_non_child(self, sample_tree):
        details = sample_tree.lookup(3)
        with pytest.raises(NotAChildError):
            sample_tree.root.remove_child(details)
        assert details.parent is sample_tree.lookup(2)

    def test_rejects_non_node(self, tree):
        with pytest.raises(InvalidArgumentError):
            tree.root.remove_child("child")


class TestCreateChild:

    def test_creates_attached_node(self, tree):
        child = tree.root.create_child("Title", "Body")

        assert child.id == 1
        assert child.title == "Title"
        assert child.content == "Body"
        assert child.parent is tree.root
        assert tree.root.children == (child,)
        assert tree.lookup(1) is child

    def test_defaults_to_empty_text(self, tree):
        child = tree.root.create_child()
        assert (child.title, child.content) == ("", "")


class TestDeleteChild:

    def test_removes_child_from_tree(self, sample_tree):
        intro = sample_tree.lookup(1)
        goals = sample_tree.lookup(4)

        intro.delete_child(goals)

        assert sample_tree.lookup(4) is None
        assert goals.is_deleted is True
        assert [child.id for child in intro.children] == [2]

    def test_refuses_child_with_children(self, sample_tree):
        intro = sample_tree.lookup(1)
        scope = sample_tree.lookup(2)
        before = sample_tree.export()

        with pytest.raises(NodeHasChildrenError):
            intro.delete_child(scope)

        assert scope.parent is intro
        assert sample_tree.export() == before

    def test_refuses_non_child(self, sample_tree):
        with pytest.raises(NotAChildError):
            sample_tree.root.delete_child(sample_tree.lookup(3))
        assert len(sample_tree) == 6


class TestReadAccess:

    def test_children_is_a_snapshot(self, sample_tree):
        children = sample_tree.root.children
        assert isinstance(children, tuple)
        with pytest.raises(AttributeError):
            children.append(sample_tree.lookup(3))
        assert len(sample_tree.root.children) == 2

    def test_structural_fields_are_read_only(self, sample_tree):
        node = sample_tree.lookup(1)
        with pytest.raises(AttributeError):
            node.id = 7
        with pytest.raises(AttributeError):
            node.parent = None
        with pytest.raises(AttributeError):
            node.children = []

    def test_text_fields_are_coerced(self, tree):
        tree.root.title = 3
        tree.root.content = None
        assert tree.root.title == "3"
        assert tree.root.content == ""

    def test_path_ancestors_and_depth(self, sample_tree):
        details = sample_tree.lookup(3)

        assert [node.id for node in details.path()] == [0, 1, 2, 3]
        assert [node.id for node in details.ancestors()] == [2, 1, 0]
        assert details.depth == 3
        assert sample_tree.root.depth == 0
        assert sample_tree.root.path() == [sample_tree.root]

    def test_descendants_in_preorder(self, sample_tree):
        assert [node.id for node in sample_tree.root.descendants()] == [1, 2, 3, 4, 5]


class TestDeletedNode:

    def test_structural_calls_fail_fast(self, sample_tree):
        goals = sample_tree.lookup(4)
        sample_tree.delete_node(goals)

        with pytest.raises(InvalidArgumentError):
            goals.create_child("Too late")
        with pytest.raises(InvalidArgumentError):
            sample_tree.root.append_child(goals)
        assert len(sample_tree) == 5
        assert "deleted" in repr(goals)
