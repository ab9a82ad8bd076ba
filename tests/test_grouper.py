"""
Unit tests for digest grouping.
Verifies every entry lands in exactly one bucket, in discovery order.
"""
from dupelink.core.catalog import Catalog
from dupelink.core.grouper import group_by_digest, duplicate_candidates


class TestGroupByDigest:

    def test_hello_world_scenario(self, hello_world_files):
        """a and b share a bucket of size 2; c is alone in a bucket of size 1."""
        catalog = Catalog()
        for key in ("a", "b", "c"):
            catalog.add(str(hello_world_files[key]))

        buckets = group_by_digest(catalog, catalog)

        sizes = sorted(len(entries) for entries in buckets.values())
        assert sizes == [1, 2]
        pair = next(entries for entries in buckets.values() if len(entries) == 2)
        assert [e.path for e in pair] == [str(hello_world_files["a"]), str(hello_world_files["b"])]

    def test_every_entry_in_exactly_one_bucket(self, test_tree):
        catalog = Catalog()
        for path in sorted(test_tree.values()):
            catalog.add(str(path))

        buckets = group_by_digest(catalog, catalog)
        grouped = [e for entries in buckets.values() for e in entries]

        assert len(grouped) == len(catalog)
        assert {id(e) for e in grouped} == {id(e) for e in catalog}

    def test_bucket_order_follows_discovery_order(self, tmp_path, write_file):
        catalog = Catalog()
        for name in ("z", "m", "a"):
            catalog.add(str(write_file(tmp_path / name, b"same")))

        buckets = group_by_digest(catalog, catalog)
        (entries,) = buckets.values()
        assert [e.index for e in entries] == [0, 1, 2]

    def test_bucket_keys_in_first_seen_order(self, tmp_path, write_file):
        catalog = Catalog()
        catalog.add(str(write_file(tmp_path / "1", b"second content")))
        catalog.add(str(write_file(tmp_path / "2", b"first content")))
        catalog.add(str(write_file(tmp_path / "3", b"second content")))

        keys = list(group_by_digest(catalog, catalog).keys())
        assert keys == [catalog.get_digest(e) for e in catalog.entries[:2]]

    def test_empty_input(self):
        catalog = Catalog()
        assert group_by_digest([], catalog) == {}


class TestDuplicateCandidates:

    def test_singletons_are_skipped(self, hello_world_files):
        catalog = Catalog()
        for key in ("a", "b", "c"):
            catalog.add(str(hello_world_files[key]))

        candidates = duplicate_candidates(group_by_digest(catalog, catalog))

        assert len(candidates) == 1
        assert candidates[0].entry_count == 2
        assert candidates[0].is_candidate()

    def test_no_candidates_when_all_unique(self, tmp_path, write_file):
        catalog = Catalog()
        for i in range(3):
            catalog.add(str(write_file(tmp_path / f"f{i}", f"content {i}".encode())))

        assert duplicate_candidates(group_by_digest(catalog, catalog)) == []
