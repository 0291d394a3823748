"""Tests for designated-sector lookup and the built-in sector catalog."""

from src.data.sectors import DEFAULT_DESIGNATED_SECTORS, SECTOR_CATALOG
from src.engine.config import RiskConfig
from src.engine.sectors import SectorClassifier, is_designated


class TestCatalog:
    def test_catalog_size(self):
        assert len(SECTOR_CATALOG.sectors) == 18

    def test_names_unique(self):
        assert len(set(SECTOR_CATALOG.names)) == len(SECTOR_CATALOG.names)

    def test_fourteen_designated(self):
        assert len(DEFAULT_DESIGNATED_SECTORS) == 14

    def test_regulated_sectors_not_designated(self):
        for name in ("Banking", "Insurance", "Government", "Other"):
            assert name in SECTOR_CATALOG.names
            assert name not in DEFAULT_DESIGNATED_SECTORS

    def test_unknown_not_listed(self):
        assert "Space Tourism" not in SECTOR_CATALOG.names


class TestIsDesignated:
    def test_default_designated(self):
        assert is_designated("Construction", RiskConfig()) is True

    def test_default_not_designated(self):
        assert is_designated("Banking", RiskConfig()) is False

    def test_unknown_sector(self):
        assert is_designated("Space Tourism", RiskConfig()) is False

    def test_exact_match_only(self):
        assert is_designated("construction", RiskConfig()) is False

    def test_follows_config(self):
        cfg = RiskConfig(designated_sectors=frozenset({"Banking"}))
        assert is_designated("Banking", cfg) is True
        assert is_designated("Construction", cfg) is False

    def test_empty_designated_set(self):
        cfg = RiskConfig(designated_sectors=frozenset())
        assert is_designated("Construction", cfg) is False

    def test_classifier_delegates(self):
        classifier = SectorClassifier()
        cfg = RiskConfig()
        for name in SECTOR_CATALOG.names:
            assert classifier.is_designated(name, cfg) == is_designated(name, cfg)
