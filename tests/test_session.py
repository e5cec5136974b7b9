"""Tests for the generation session (settings, validation, collection state)."""

from __future__ import annotations

import pytest

from traitgen.errors import CapacityError, ConfigurationError, IncompleteCollectionError
from traitgen.generator import combination_key
from traitgen.session import GenerationSession

from conftest import make_layers


def test_defaults():
    session = GenerationSession()
    assert session.settings["collection_size"] == 10
    assert session.settings["respect_rarity"] is True
    assert session.settings["avoid_duplicates"] is True
    assert 0 <= session.settings["seed"] <= 0xFFFFFFFF
    assert session.total_nfts() == 0
    assert session.distribution is None


class TestSettings:
    def test_update_and_normalize(self):
        session = GenerationSession()
        session.update_settings(collection_size="25", seed=-1, avoid_duplicates=False)
        assert session.settings["collection_size"] == 25
        assert session.settings["seed"] == 0xFFFFFFFF
        assert session.settings["avoid_duplicates"] is False

    def test_unknown_setting_rejected(self):
        with pytest.raises(ConfigurationError, match="colour"):
            GenerationSession().update_settings(colour="red")

    @pytest.mark.parametrize("size", [-1, "many"])
    def test_bad_collection_size_rejected(self, size):
        with pytest.raises(ConfigurationError):
            GenerationSession().update_settings(collection_size=size)

    @pytest.mark.parametrize("attempts", ["x", 0, -3])
    def test_bad_max_attempts_rejected(self, attempts):
        with pytest.raises(ConfigurationError, match="max_attempts"):
            GenerationSession().update_settings(max_attempts=attempts)

    def test_max_attempts_accepts_none_and_numbers(self):
        session = GenerationSession()
        session.update_settings(max_attempts="50")
        assert session.settings["max_attempts"] == 50
        session.update_settings(max_attempts=None)
        assert session.settings["max_attempts"] is None

    @pytest.mark.parametrize("value", ["false", 1, None])
    def test_non_bool_flags_rejected(self, value):
        with pytest.raises(ConfigurationError, match="avoid_duplicates"):
            GenerationSession().update_settings(avoid_duplicates=value)

    def test_new_seed_is_32_bit(self):
        session = GenerationSession()
        seed = session.new_seed()
        assert seed == session.settings["seed"]
        assert 0 <= seed <= 0xFFFFFFFF

    def test_config_roundtrip(self):
        session = GenerationSession({"collection_size": 3, "seed": 9})
        restored = GenerationSession.from_config(session.to_config())
        assert restored.settings == session.settings


class TestGenerateCollection:
    def test_generates_and_analyzes(self, layers):
        session = GenerationSession({"collection_size": 12, "seed": 42})
        progress = []

        result = session.generate_collection(layers, progress_callback=lambda done, total: progress.append(done))

        assert len(result) == 12
        assert session.total_nfts() == 12
        assert session.distribution["total_items"] == 12
        assert session.progress == 100
        assert session.is_generating is False
        assert session.error is None
        assert progress == list(range(1, 13))

    def test_same_seed_same_collection(self, layers):
        a = GenerationSession({"collection_size": 12, "seed": 42}).generate_collection(layers)
        b = GenerationSession({"collection_size": 12, "seed": 42}).generate_collection(layers)
        assert [combination_key(c) for c in a] == [combination_key(c) for c in b]

    def test_over_capacity_rejected_before_generation(self, layers):
        session = GenerationSession({"collection_size": 5, "seed": 1})
        previous = session.generate_collection(layers)

        session.update_settings(collection_size=25)
        with pytest.raises(CapacityError) as excinfo:
            session.generate_collection(layers)

        assert excinfo.value.requested == 25
        assert excinfo.value.available == 24
        assert "only 24 are possible" in session.error
        assert session.combinations == previous
        assert session.is_generating is False

    def test_over_capacity_allowed_with_duplicates(self):
        layers = make_layers({"Background": ["A", "B"], "Eyes": ["X"]})
        session = GenerationSession({"collection_size": 4, "seed": 42, "avoid_duplicates": False})
        assert len(session.generate_collection(layers)) == 4

    def test_layer_order_and_exclusions_forwarded(self, layers):
        session = GenerationSession({"collection_size": 3, "seed": 1})
        result = session.generate_collection(layers, layer_order=["Eyes", "Body"], excluded_layers=["Body"])
        assert all(list(c) == ["Eyes"] for c in result)

    def test_rarity_metadata_applied(self):
        layers = make_layers({"Eyes": ["X", "Never"]})
        session = GenerationSession({"collection_size": 50, "seed": 3, "avoid_duplicates": False})
        result = session.generate_collection(layers, {"Eyes": {"Never": {"rarity": 0}}})
        assert {c["Eyes"]["trait_name"] for c in result} == {"X"}


def test_get_nft_and_clear(layers):
    session = GenerationSession({"collection_size": 4, "seed": 5})
    result = session.generate_collection(layers)

    assert session.get_nft(0) is result[0]
    assert session.get_nft(4) is None
    assert session.get_nft(-1) is None

    session.clear_collection()
    assert session.total_nfts() == 0
    assert session.distribution is None
    assert session.progress == 0


def rare_layers():
    layers = make_layers({"Hat": ["Common", "Rare"], "Eyes": ["Common", "Rare"], "Mouth": ["Common", "Rare"]})
    metadata = {category: {"Rare": {"rarity": 1}} for category in layers}
    return layers, metadata


class TestShortCollections:
    def test_low_rarity_traits_fill_whole_capacity(self):
        layers, metadata = rare_layers()
        session = GenerationSession({"collection_size": 8, "seed": 42})

        result = session.generate_collection(layers, metadata)

        assert len({combination_key(c) for c in result}) == 8
        assert session.error is None

    def test_unreachable_capacity_rejected_before_generation(self):
        layers = make_layers({"Eyes": ["X", "Never"]})
        session = GenerationSession({"collection_size": 2, "seed": 1})

        with pytest.raises(CapacityError) as excinfo:
            session.generate_collection(layers, {"Eyes": {"Never": {"rarity": 0}}})

        assert excinfo.value.available == 1
        assert session.total_nfts() == 0
        assert "only 1 are possible" in session.error

    def test_unreachable_traits_ignored_without_rarity(self):
        layers = make_layers({"Eyes": ["X", "Never"]})
        session = GenerationSession({"collection_size": 2, "seed": 1, "respect_rarity": False})
        result = session.generate_collection(layers, {"Eyes": {"Never": {"rarity": 0}}})
        assert {c["Eyes"]["trait_name"] for c in result} == {"X", "Never"}

    def test_capped_run_keeps_partial_and_raises(self):
        layers = make_layers({"Eyes": ["Common", "Rare"]})
        session = GenerationSession({"collection_size": 2, "seed": 11, "max_attempts": 1})

        with pytest.raises(IncompleteCollectionError) as excinfo:
            session.generate_collection(layers, {"Eyes": {"Rare": {"rarity": 0.01}}})

        assert excinfo.value.requested == 2
        assert len(excinfo.value.combinations) == 1
        assert session.total_nfts() == 1
        assert session.distribution["total_items"] == 1
        assert session.error == "Generated only 1 of 2 requested combinations."
        assert session.progress < 100
