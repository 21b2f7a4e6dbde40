"""Tests for the bundled offline datasets."""

from echoes.sources.offline import get_offline_concept_data, offline_concepts


class TestOfflineDatasets:
    def test_bundled_concepts(self):
        assert set(offline_concepts()) >= {"Freedom", "Circle", "AI"}

    def test_lookup_is_case_insensitive(self):
        data = get_offline_concept_data("freedom")
        assert data.concept == "Freedom"
        assert data.years == [1940, 1980, 2020]

    def test_every_link_references_snapshot_nodes(self):
        for name in offline_concepts():
            data = get_offline_concept_data(name)
            for year, snap in data.evolution.items():
                ids = snap.node_ids
                for link in snap.links:
                    assert link.source in ids, f"{name} {year}: {link.source}"
                    assert link.target in ids, f"{name} {year}: {link.target}"

    def test_unknown_concept_uses_generic_template(self):
        data = get_offline_concept_data("Harvest")

        assert data.concept == "Harvest"
        assert data.years == [1940, 1980, 2020]
        main = data.evolution[1940].nodes[0]
        assert main.id == "main"
        assert main.label == "Harvest"
        assert "Harvest" in data.narrative.summary
