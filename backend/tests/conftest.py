"""Shared test fixtures for FlowPatch backend tests."""
import sys
from pathlib import Path

import pytest

# Ensure flowpatch package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


@pytest.fixture
def workflow_doc():
    """Trigger -> HTTP Request -> Set, with connections keyed by node name."""
    return {
        "id": "wf1",
        "name": "Fetch and shape",
        "active": False,
        "settings": {"executionOrder": "v1"},
        "tags": ["demo"],
        "nodes": [
            {
                "id": "n1",
                "name": "Trigger",
                "type": "n8n-nodes-base.manualTrigger",
                "typeVersion": 1,
                "position": [0, 0],
                "parameters": {},
            },
            {
                "id": "n2",
                "name": "HTTP Request",
                "type": "n8n-nodes-base.httpRequest",
                "typeVersion": 4,
                "position": [220, 0],
                "parameters": {
                    "url": "https://example.com/api",
                    "method": "GET",
                    "options": {"timeout": 10, "headers": {"accept": "json"}},
                    "list": [1, 2, 3],
                },
                "credentials": {"httpBasicAuth": {"id": "c1", "name": "Basic"}},
            },
            {
                "id": "n3",
                "name": "Set",
                "type": "n8n-nodes-base.set",
                "typeVersion": 3,
                "position": [440, 0],
                "disabled": True,
                "parameters": {"values": {"string": [{"name": "a", "value": "b"}]}},
            },
        ],
        "connections": {
            "Trigger": {
                "main": [[{"node": "HTTP Request", "type": "main", "index": 0}]],
            },
            "HTTP Request": {
                "main": [[{"node": "Set", "type": "main", "index": 0}], []],
            },
        },
    }


@pytest.fixture
def id_keyed_doc():
    """a -> b, a -> c (second output), with connections keyed by node id."""
    return {
        "name": "Branching",
        "nodes": [
            {"id": "a", "name": "If", "type": "n8n-nodes-base.if", "position": [0, 0],
             "parameters": {}},
            {"id": "b", "name": "True Branch", "type": "n8n-nodes-base.noOp",
             "position": [200, -100], "parameters": {}},
            {"id": "c", "name": "False Branch", "type": "n8n-nodes-base.noOp",
             "position": [200, 100], "parameters": {}},
        ],
        "connections": {
            "a": {
                "main": [
                    [{"node": "b", "type": "main", "index": 0}],
                    [{"node": "c", "type": "main", "index": 0}],
                ],
            },
        },
    }
