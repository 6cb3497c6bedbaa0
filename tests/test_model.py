"""Tests for HierarchyModel construction, lookups, moves and export."""

from __future__ import annotations

import pytest

from dragtree import (
    DuplicateSiblingNameError,
    HierarchyModel,
    HierarchySchema,
    InvariantViolation,
    MalformedHierarchyError,
    RootReparentError,
    SelfOrAncestorTargetError,
    SiblingNameClashError,
    UnknownNodeError,
)
from dragtree.model import find_invariant_problems


class TestBuild:
    """Converting a nested hierarchy into the node arena."""

    def test_stable_ids_follow_preorder(self, model, ids):
        assert [n.name for n in model] == list(ids)
        assert [n.stable_id for n in model] == list(ids.values())

    def test_ancestor_paths_nearest_first(self, model):
        yorkie = model.find("Animals/Mammals/Dogs/Terrier/Yorkie")
        assert yorkie.ancestor_path == ("Terrier", "Dogs", "Mammals", "Animals")
        assert yorkie.depth == 4
        assert model.root.ancestor_path == ()

    def test_every_node_starts_expanded(self, model):
        assert not any(n.collapsed for n in model)
        assert all(n.hidden_child_ids is None for n in model)

    def test_payload_excludes_name_and_children(self, model, ids):
        dogs = model.node(ids["Dogs"])
        assert dogs.payload == {"Father": "Mammals", "Synonyms": ["Canines"], "Verbs": ["bark"]}
        assert dogs.synonyms == ["Canines"]
        assert dogs.verbs == ["bark"]

    def test_payload_is_copied(self, raw_tree):
        model = HierarchyModel.build(raw_tree)
        raw_tree["Synonyms"].append("Wildlife")
        assert model.root.synonyms == ["Fauna"]

    def test_single_node(self):
        model = HierarchyModel.build({"Name": "Only", "Children": []})
        assert len(model) == 1
        assert model.root.is_leaf

    def test_null_children_is_leaf(self):
        model = HierarchyModel.build({"Name": "Root", "Children": [{"Name": "A", "Children": None}]})
        assert model.find("Root/A").is_leaf

    def test_custom_children_accessor(self):
        raw = {"Name": "Root", "kids": [{"Name": "A"}, {"Name": "B"}]}
        model = HierarchyModel.build(raw, lambda item: item.get("kids"))
        assert [n.name for n in model.children(model.root)] == ["A", "B"]

    def test_custom_schema(self):
        schema = HierarchySchema(name_key="label", children_key="items", parent_key=None)
        model = HierarchyModel.build(
            {"label": "r", "items": [{"label": "a", "items": []}]}, schema=schema
        )
        assert model.find("r/a").name == "a"
        assert model.to_plain_tree() == {"label": "r", "items": [{"label": "a", "items": []}]}


class TestBuildErrors:
    """Malformed input never yields a partial model."""

    def test_missing_name(self):
        with pytest.raises(MalformedHierarchyError) as exc_info:
            HierarchyModel.build({"Name": "Root", "Children": [{"Children": []}]})
        assert exc_info.value.location == ("Root",)
        assert "missing 'Name'" in str(exc_info.value)

    def test_empty_name(self):
        with pytest.raises(MalformedHierarchyError):
            HierarchyModel.build({"Name": "", "Children": []})

    def test_missing_children(self):
        with pytest.raises(MalformedHierarchyError) as exc_info:
            HierarchyModel.build({"Name": "Root", "Children": [{"Name": "A"}]})
        assert exc_info.value.location == ("Root", "A")

    def test_children_not_a_list(self):
        with pytest.raises(MalformedHierarchyError, match="children must be a list"):
            HierarchyModel.build({"Name": "Root", "Children": {"Name": "A"}})

    def test_child_not_an_object(self):
        with pytest.raises(MalformedHierarchyError, match="expected an object"):
            HierarchyModel.build({"Name": "Root", "Children": ["A"]})

    def test_duplicate_sibling_names(self):
        raw = {
            "Name": "Root",
            "Children": [{"Name": "A", "Children": []}, {"Name": "A", "Children": []}],
        }
        with pytest.raises(DuplicateSiblingNameError) as exc_info:
            HierarchyModel.build(raw)
        assert exc_info.value.parent_name == "Root"
        assert exc_info.value.name == "A"

    def test_same_name_in_different_branches_is_fine(self):
        raw = {
            "Name": "Root",
            "Children": [
                {"Name": "A", "Children": [{"Name": "X", "Children": []}]},
                {"Name": "B", "Children": [{"Name": "X", "Children": []}]},
            ],
        }
        model = HierarchyModel.build(raw)
        assert model.find("Root/A/X") is not model.find("Root/B/X")


class TestLookups:
    def test_find_by_string_and_sequence(self, model, ids):
        assert model.find("Animals/Birds/Owls").stable_id == ids["Owls"]
        assert model.find(["Animals", "Birds"]).stable_id == ids["Birds"]

    def test_find_unknown_path(self, model):
        with pytest.raises(UnknownNodeError):
            model.find("Animals/Reptiles")
        with pytest.raises(UnknownNodeError):
            model.find("Plants")

    def test_unknown_id(self, model):
        with pytest.raises(UnknownNodeError):
            model.node(999)
        with pytest.raises(KeyError):
            model.node(-1)

    def test_foreign_node_rejected(self, model, raw_tree):
        other = HierarchyModel.build(raw_tree)
        with pytest.raises(UnknownNodeError, match="does not belong"):
            model.node(other.root)

    def test_contains(self, model):
        assert 0 in model
        assert 999 not in model

    def test_path_of_is_root_first(self, model, ids):
        assert model.path_of(ids["Siamese"]) == ("Animals", "Mammals", "Cats", "Siamese")

    def test_descendants(self, model, ids):
        names = [n.name for n in model.descendants(ids["Dogs"])]
        assert names == ["Terrier", "Yorkie", "Hound"]

    def test_is_descendant(self, model, ids):
        assert model.is_descendant(ids["Yorkie"], ids["Mammals"])
        assert not model.is_descendant(ids["Mammals"], ids["Yorkie"])
        assert not model.is_descendant(ids["Dogs"], ids["Dogs"])
        assert not model.is_descendant(ids["Parrots"], ids["Mammals"])

    def test_is_descendant_compares_whole_lineage(self):
        # "X" appears under both branches; only the real subtree counts
        raw = {
            "Name": "Root",
            "Children": [
                {"Name": "A", "Children": [{"Name": "X", "Children": [{"Name": "Y", "Children": []}]}]},
                {"Name": "B", "Children": [{"Name": "X", "Children": []}]},
            ],
        }
        model = HierarchyModel.build(raw)
        assert model.is_descendant(model.find("Root/A/X/Y"), model.find("Root/A/X"))
        assert not model.is_descendant(model.find("Root/A/X/Y"), model.find("Root/B/X"))

    def test_nx_graph_mirrors_structure(self, model, ids):
        G = model.nx_graph
        assert G.number_of_nodes() == len(model)
        assert G.number_of_edges() == len(model) - 1
        assert G.has_edge(ids["Dogs"], ids["Hound"])
        assert G.nodes[ids["Hound"]]["name"] == "Hound"


class TestReparent:
    """Structural moves and their effect on ancestor paths."""

    def test_moves_subtree_and_rewrites_paths(self, model, ids):
        result = model.reparent(ids["Terrier"], ids["Birds"])

        terrier = model.node(ids["Terrier"])
        yorkie = model.node(ids["Yorkie"])
        assert terrier.parent_id == ids["Birds"]
        assert terrier.ancestor_path == ("Birds", "Animals")
        assert yorkie.ancestor_path == ("Terrier", "Birds", "Animals")
        assert result.old_parent_id == ids["Dogs"]
        assert result.new_parent_id == ids["Birds"]
        assert set(result.updated_ids) == {ids["Terrier"], ids["Yorkie"]}
        model.verify()

    def test_appended_as_last_child(self, model, ids):
        model.reparent(ids["Fish"], ids["Birds"])
        assert [n.name for n in model.children(ids["Birds"])] == ["Parrots", "Owls", "Fish"]
        assert [n.name for n in model.children(ids["Animals"])] == ["Mammals", "Birds"]

    def test_father_field_follows_move(self, model, ids):
        model.reparent(ids["Hound"], ids["Cats"])
        assert model.node(ids["Hound"]).payload["Father"] == "Cats"

    def test_stable_ids_survive_move(self, model, ids):
        hound = model.node(ids["Hound"])
        model.reparent(hound, ids["Cats"])
        assert model.node(ids["Hound"]) is hound
        assert model.find("Animals/Mammals/Cats/Hound") is hound

    def test_revision_bumps(self, model, ids):
        before = model.revision
        model.reparent(ids["Fish"], ids["Birds"])
        assert model.revision == before + 1

    def test_move_into_collapsed_parent(self, model, ids):
        model.node(ids["Birds"]).collapsed = True
        model.reparent(ids["Fish"], ids["Birds"])
        assert model.node(ids["Birds"]).hidden_child_ids == (ids["Parrots"], ids["Owls"], ids["Fish"])
        model.verify()

    def test_root_cannot_move(self, model, ids):
        with pytest.raises(RootReparentError):
            model.reparent(ids["Animals"], ids["Fish"])

    def test_onto_self_rejected(self, model, ids):
        with pytest.raises(SelfOrAncestorTargetError):
            model.reparent(ids["Dogs"], ids["Dogs"])

    def test_onto_descendant_rejected(self, model, ids):
        with pytest.raises(SelfOrAncestorTargetError) as exc_info:
            model.reparent(ids["Mammals"], ids["Yorkie"])
        assert exc_info.value.node_id == ids["Mammals"]
        assert exc_info.value.target_id == ids["Yorkie"]

    def test_sibling_name_clash_rejected(self):
        raw = {
            "Name": "Root",
            "Children": [
                {"Name": "A", "Children": [{"Name": "X", "Children": []}]},
                {"Name": "B", "Children": [{"Name": "X", "Children": []}]},
            ],
        }
        model = HierarchyModel.build(raw)
        with pytest.raises(SiblingNameClashError) as exc_info:
            model.reparent(model.find("Root/A/X"), model.find("Root/B"))
        assert exc_info.value.parent_name == "B"
        assert exc_info.value.name == "X"

    def test_rejected_move_changes_nothing(self, model, ids):
        before = model.to_plain_tree()
        with pytest.raises(SelfOrAncestorTargetError):
            model.reparent(ids["Dogs"], ids["Hound"])
        assert model.to_plain_tree() == before
        assert model.revision == 0

    def test_move_to_current_parent_keeps_order_at_end(self, model, ids):
        model.reparent(ids["Terrier"], ids["Dogs"])
        assert [n.name for n in model.children(ids["Dogs"])] == ["Hound", "Terrier"]
        model.verify()


class TestExport:
    def test_round_trip_is_identical(self, model, raw_tree):
        assert model.to_plain_tree() == raw_tree

    def test_round_trip_keeps_key_order(self, model):
        exported = model.to_plain_tree()
        assert list(exported) == ["Name", "Synonyms", "Verbs", "Children"]

    def test_export_includes_collapsed_subtrees(self, model, ids, raw_tree):
        model.node(ids["Mammals"]).collapsed = True
        assert model.to_plain_tree() == raw_tree

    def test_export_after_move_rebuilds_equal_model(self, model, ids):
        model.reparent(ids["Dogs"], ids["Birds"])
        rebuilt = HierarchyModel.build(model.to_plain_tree())
        assert [n.ancestor_path for n in rebuilt] == [n.ancestor_path for n in model]

    def test_deep_chain_exports_without_recursion(self):
        depth = 2500
        raw = {"Name": "n0", "Children": []}
        tip = raw
        for i in range(1, depth):
            child = {"Name": f"n{i}", "Children": []}
            tip["Children"].append(child)
            tip = child

        exported = HierarchyModel.build(raw).to_plain_tree()

        names = []
        current = exported
        while current is not None:
            names.append(current["Name"])
            current = current["Children"][0] if current["Children"] else None
        assert names == [f"n{i}" for i in range(depth)]

    def test_sibling_order_kept_in_export(self, model, ids):
        model.reparent(ids["Fish"], ids["Mammals"])
        mammals = model.to_plain_tree()["Children"][0]
        assert [c["Name"] for c in mammals["Children"]] == ["Dogs", "Cats", "Fish"]


class TestVerify:
    def test_fresh_model_is_consistent(self, model):
        assert find_invariant_problems(model) == []
        model.verify()

    def test_detects_stale_path(self, model, ids):
        model.node(ids["Hound"]).ancestor_path = ("Cats", "Mammals", "Animals")
        with pytest.raises(InvariantViolation) as exc_info:
            model.verify()
        assert any("Hound" in p for p in exc_info.value.problems)

    def test_detects_broken_parent_link(self, model, ids):
        model.node(ids["Hound"]).parent_id = ids["Cats"]
        problems = find_invariant_problems(model)
        assert problems
        assert any("Hound" in p for p in problems)
