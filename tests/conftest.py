"""Shared fixtures: small layer listings and a Qt core application."""

from __future__ import annotations

import pytest
from PySide6.QtCore import QCoreApplication


def make_layers(listing):
    """{"Background": ["A", "B"]} -> {"Background": [{"id": "A.png", "name": "A"}, ...]}"""
    return {
        category: [{"id": f"{name}.png", "name": name} for name in names]
        for category, names in listing.items()
    }


@pytest.fixture
def layers():
    return make_layers({
        "Background": ["Blue Sky", "Sunset", "Night"],
        "Body": ["Robot", "Alien"],
        "Eyes": ["Laser", "Sleepy", "Wide", "Wink"],
    })


@pytest.fixture(scope="session")
def qapp():
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
