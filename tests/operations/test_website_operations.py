"""Tests for website operations."""

import pytest

from sitegrid.operations.results import ResultStatus
from sitegrid.operations.websites import WebsiteOperations


@pytest.fixture
def ops(store):
    return WebsiteOperations(store)


class TestCreate:
    def test_success(self, ops, store):
        result = ops.create("GitHub", "github.com")

        assert result.success
        assert result.message == "Added GitHub"
        assert store.get_website(result.entity_id) == result.entity

    def test_validation_failed(self, ops, store):
        result = ops.create("", "https://a.com")

        assert result.status is ResultStatus.VALIDATION_FAILED
        assert "name" in result.validation_errors
        assert store.websites == []


class TestUpdate:
    def test_success(self, ops):
        created = ops.create("Old", "https://a.com")
        result = ops.update(created.entity_id, {"name": "New"})
        assert result.success
        assert result.entity.name == "New"

    def test_not_found(self, ops):
        result = ops.update("nope", {"name": "New"})
        assert result.status is ResultStatus.NOT_FOUND
        assert result.entity_id == "nope"

    def test_immutable_field(self, ops):
        created = ops.create("A", "https://a.com")
        result = ops.update(created.entity_id, {"id": "other"})
        assert result.status is ResultStatus.VALIDATION_FAILED
        assert result.validation_errors == {"id": "This field cannot be changed"}


class TestMoveAndReorder:
    def test_move_message_is_one_based(self, ops, store, fill):
        websites = fill(store, 3)
        result = ops.move(websites[0].id, 0, 2)
        assert result.success
        assert result.message == "Moved Site 0 to page 1"

    def test_move_to_full_page(self, ops, store, fill):
        websites = fill(store, 36)
        result = ops.move(websites[35].id, 0, 0)
        assert result.status is ResultStatus.CONFLICT

    def test_reorder_stale_ids(self, ops, store, fill):
        websites = fill(store, 2)

        result = ops.reorder(0, [websites[0].id, "ghost"])

        assert result.status is ResultStatus.CONFLICT
        assert "extra: ghost" in result.errors
        assert f"missing: {websites[1].id}" in result.errors

    def test_reorder(self, ops, store, fill):
        websites = fill(store, 2)
        result = ops.reorder(0, [websites[1].id, websites[0].id])
        assert result.success
        assert [w.id for w in result.entity] == [websites[1].id, websites[0].id]


class TestDeleteAndVisit:
    def test_delete(self, ops, store):
        created = ops.create("A", "https://a.com")
        result = ops.delete(created.entity_id)
        assert result.success
        assert store.websites == []

    def test_delete_missing(self, ops):
        assert ops.delete("nope").status is ResultStatus.NOT_FOUND

    def test_visit_returns_url(self, ops):
        created = ops.create("A", "a.com")
        result = ops.visit(created.entity_id)
        assert result.message == "https://a.com/"
        assert result.entity.metadata.visit_count == 1
