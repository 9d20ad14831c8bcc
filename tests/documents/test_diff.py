"""Tests for principal and tag diffs."""

from ssm_document.documents.diff import SetDiff, TagDiff, diff_principals, diff_tags


class TestDiffPrincipals:
    def test_add_and_remove(self):
        diff = diff_principals(["111", "222"], ["222", "333"])
        assert diff == SetDiff(to_add=["111"], to_remove=["333"])
        assert diff.has_changes

    def test_identical_sets_have_no_changes(self):
        diff = diff_principals(["111", "222"], ["222", "111"])
        assert not diff.has_changes

    def test_empty_sides(self):
        assert diff_principals([], []) == SetDiff()
        assert diff_principals(["111"], []) == SetDiff(to_add=["111"])
        assert diff_principals([], ["111"]) == SetDiff(to_remove=["111"])

    def test_order_preserved_and_duplicates_collapsed(self):
        diff = diff_principals(["333", "111", "333"], [])
        assert diff.to_add == ["333", "111"]

    def test_applying_diff_reaches_desired(self):
        desired, live = ["1", "2", "5"], ["2", "3", "4"]
        diff = diff_principals(desired, live)
        result = (set(live) - set(diff.to_remove)) | set(diff.to_add)
        assert result == set(desired)
        assert not set(diff.to_add) & set(diff.to_remove)

    def test_inputs_not_mutated(self):
        desired, live = ["1"], ["2"]
        diff_principals(desired, live)
        assert desired == ["1"] and live == ["2"]


class TestDiffTags:
    def test_changed_value_is_re_added_not_removed(self):
        diff = diff_tags({"env": "prod", "team": "a"}, {"env": "dev", "owner": "x"})
        assert diff == TagDiff(to_add={"env": "prod", "team": "a"}, to_remove=["owner"])

    def test_identical_tags(self):
        assert not diff_tags({"env": "dev"}, {"env": "dev"}).has_changes

    def test_remove_all(self):
        assert diff_tags({}, {"a": "1", "b": "2"}) == TagDiff(to_remove=["a", "b"])

    def test_add_all(self):
        assert diff_tags({"a": "1"}, {}) == TagDiff(to_add={"a": "1"})
