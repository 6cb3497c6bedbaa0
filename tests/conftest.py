"""Shared fixtures: a small taxonomy deep enough for every drag rule."""

from __future__ import annotations

import copy

import pytest

from dragtree import EngineConfig, HierarchyModel


def _leaf(name, father, **fields):
    return {"Name": name, "Father": father, **fields, "Children": []}


ANIMALS = {
    "Name": "Animals",
    "Synonyms": ["Fauna"],
    "Verbs": [],
    "Children": [
        {
            "Name": "Mammals",
            "Father": "Animals",
            "Children": [
                {
                    "Name": "Dogs",
                    "Father": "Mammals",
                    "Synonyms": ["Canines"],
                    "Verbs": ["bark"],
                    "Children": [
                        {
                            "Name": "Terrier",
                            "Father": "Dogs",
                            "Children": [_leaf("Yorkie", "Terrier")],
                        },
                        _leaf("Hound", "Dogs", Verbs=["howl"]),
                    ],
                },
                {
                    "Name": "Cats",
                    "Father": "Mammals",
                    "Children": [_leaf("Siamese", "Cats")],
                },
            ],
        },
        {
            "Name": "Birds",
            "Father": "Animals",
            "Children": [_leaf("Parrots", "Birds"), _leaf("Owls", "Birds")],
        },
        _leaf("Fish", "Animals"),
    ],
}

# Pre-order stable ids of ANIMALS
IDS = {
    "Animals": 0,
    "Mammals": 1,
    "Dogs": 2,
    "Terrier": 3,
    "Yorkie": 4,
    "Hound": 5,
    "Cats": 6,
    "Siamese": 7,
    "Birds": 8,
    "Parrots": 9,
    "Owls": 10,
    "Fish": 11,
}


@pytest.fixture
def raw_tree():
    return copy.deepcopy(ANIMALS)


@pytest.fixture
def model(raw_tree):
    return HierarchyModel.build(raw_tree)


@pytest.fixture
def config():
    return EngineConfig(dnd_threshold=30, min_drag_travel=2)


def place_on_grid(model):
    """Give every visible node a far-apart position: x = id * 100, y = depth * 200."""
    for node in model.visible_nodes():
        node.x = float(node.stable_id * 100)
        node.y = float(node.depth * 200)
        node.x0, node.y0 = node.x, node.y


@pytest.fixture
def ids():
    return dict(IDS)


@pytest.fixture
def grid():
    return place_on_grid
