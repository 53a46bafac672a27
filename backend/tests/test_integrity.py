"""Tests for workflow integrity validation: uniqueness and dangling references."""
from flowpatch.engine.integrity import validate_workflow_integrity


class TestNodeCollection:
    def test_empty_nodes(self):
        report = validate_workflow_integrity({"nodes": [], "connections": {}})
        assert not report.valid
        assert report.warnings == ["Workflow has no nodes"]

    def test_missing_nodes_does_not_raise(self):
        report = validate_workflow_integrity({"name": "bare"})
        assert not report.valid


class TestUniqueness:
    def test_duplicate_id(self):
        report = validate_workflow_integrity({"nodes": [
            {"id": "a", "name": "One"},
            {"id": "a", "name": "Two"},
        ]})
        assert not report.valid
        assert report.warnings == ["Duplicate node ID found: a"]

    def test_duplicate_name(self):
        report = validate_workflow_integrity({"nodes": [
            {"id": "a", "name": "Same"},
            {"id": "b", "name": "Same"},
        ]})
        assert report.warnings == ["Duplicate node name found: Same"]

    def test_only_first_duplicate_reported(self):
        report = validate_workflow_integrity({
            "nodes": [
                {"id": "a", "name": "X"},
                {"id": "b", "name": "X"},
                {"id": "a", "name": "Y"},
            ],
            "connections": {"ghost": {"main": [[{"node": "phantom"}]]}},
        })
        assert report.warnings == ["Duplicate node name found: X"]


class TestConnectionReferences:
    def test_valid_name_keyed(self, workflow_doc):
        report = validate_workflow_integrity(workflow_doc)
        assert report.valid
        assert report.warnings == []

    def test_valid_id_keyed(self, id_keyed_doc):
        assert validate_workflow_integrity(id_keyed_doc).valid

    def test_mixed_keys(self, id_keyed_doc):
        id_keyed_doc["connections"]["True Branch"] = {
            "main": [[{"node": "c", "index": 0}]],
        }
        assert validate_workflow_integrity(id_keyed_doc).valid

    def test_dangling_target(self, workflow_doc):
        workflow_doc["connections"]["Set"] = {"main": [[{"node": "Nowhere", "index": 0}]]}
        report = validate_workflow_integrity(workflow_doc)
        assert not report.valid
        assert report.warnings == ["Connection to non-existent node: Nowhere"]

    def test_dangling_source(self, workflow_doc):
        workflow_doc["connections"]["Ghost"] = {"main": [[{"node": "Set", "index": 0}]]}
        report = validate_workflow_integrity(workflow_doc)
        assert report.warnings == ["Connection from non-existent node: Ghost"]

    def test_dangling_reference_in_other_connection_type(self, workflow_doc):
        workflow_doc["connections"]["HTTP Request"]["ai_tool"] = [[{"node": "Agent"}]]
        report = validate_workflow_integrity(workflow_doc)
        assert report.warnings == ["Connection to non-existent node: Agent"]

    def test_all_dangling_references_collected(self, workflow_doc):
        workflow_doc["connections"]["Ghost"] = {"main": [[{"node": "Phantom"}]]}
        report = validate_workflow_integrity(workflow_doc)
        assert len(report.warnings) == 2

    def test_malformed_connections_do_not_raise(self, workflow_doc):
        workflow_doc["connections"]["Set"] = {"main": "garbage"}
        workflow_doc["connections"]["Trigger"] = None
        report = validate_workflow_integrity(workflow_doc)
        assert report.valid

    def test_to_dict(self, workflow_doc):
        assert validate_workflow_integrity(workflow_doc).to_dict() == {
            "valid": True, "warnings": [],
        }


class TestMalformedKeys:
    def test_non_string_target_is_checked(self):
        report = validate_workflow_integrity({
            "nodes": [{"id": "a", "name": "A"}],
            "connections": {"a": {"main": [[{"node": 123, "index": 0}]]}},
        })
        assert not report.valid
        assert report.warnings == ["Connection to non-existent node: 123"]

    def test_unhashable_target_does_not_raise(self):
        report = validate_workflow_integrity({
            "nodes": [{"id": "a", "name": "A"}],
            "connections": {"a": {"main": [[{"node": ["b"]}]]}},
        })
        assert report.warnings == ["Connection to non-existent node: ['b']"]

    def test_unhashable_id_does_not_raise(self):
        report = validate_workflow_integrity({
            "nodes": [{"id": ["a"], "name": "A"}],
            "connections": {},
        })
        assert not report.valid
        assert report.warnings == ["Node at position 0 has an invalid ID: ['a']"]

    def test_missing_name_is_flagged(self):
        report = validate_workflow_integrity({
            "nodes": [{"id": "a", "name": "A"}, {"id": "b"}, {"id": "c"}],
        })
        assert report.warnings == [
            "Node at position 1 has no name",
            "Node at position 2 has no name",
        ]
