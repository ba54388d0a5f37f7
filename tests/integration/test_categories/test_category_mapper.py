"""Integration tests for the closure-table statements of CategoryMapper.

These drive the mapper directly, without the repository's validation, to
pin down the rows each primitive writes.
"""

from __future__ import annotations

import pytest

from tests.utils import make_category, path_rows


async def _insert(session, mapper, name: str, parent: int) -> int:
    category = await mapper.insert(session, make_category(name))
    await mapper.insert_path(session, category.id, parent)
    await mapper.insert_node(session, category.id)
    return category.id


@pytest.fixture
async def chain(db_session, mapper) -> list[int]:
    """A -> B -> C -> D, returned top-down."""
    ids: list[int] = []
    parent = 0
    for name in "ABCD":
        parent = await _insert(db_session, mapper, name, parent)
        ids.append(parent)
    return ids


@pytest.mark.integration
class TestMapperReads:
    @pytest.mark.asyncio
    async def test_contains(self, db_session, mapper, chain):
        assert await mapper.contains(db_session, chain[0]) is True
        assert await mapper.contains(db_session, 0) is False
        assert await mapper.contains(db_session, 999999) is False

    @pytest.mark.asyncio
    async def test_select_layer_counts_self_row(self, db_session, mapper, chain):
        assert [await mapper.select_layer(db_session, i) for i in chain] == [1, 2, 3, 4]
        assert await mapper.select_layer(db_session, 999999) == 0

    @pytest.mark.asyncio
    async def test_select_ancestor(self, db_session, mapper, chain):
        a, b, c, d = chain
        assert await mapper.select_ancestor(db_session, d, 1) == c
        assert await mapper.select_ancestor(db_session, d, 3) == a
        assert await mapper.select_ancestor(db_session, d, 4) is None
        assert await mapper.select_ancestor(db_session, a, 1) is None

    @pytest.mark.asyncio
    async def test_id_lists(self, db_session, mapper, chain):
        a, b, c, d = chain
        assert await mapper.select_descendant_id(db_session, b) == [c, d]
        assert await mapper.select_ancestor_ids(db_session, c) == [b, a]

    @pytest.mark.asyncio
    async def test_counts(self, db_session, mapper, chain):
        assert await mapper.select_count(db_session) == 4
        assert await mapper.select_count_by_layer(db_session, 4) == 1
        assert await mapper.select_count_by_layer(db_session, 5) == 0


@pytest.mark.integration
class TestMapperWrites:
    @pytest.mark.asyncio
    async def test_update_returns_rowcount(self, db_session, mapper, chain):
        category = await mapper.select_attributes(db_session, chain[0])
        category.name = "Renamed"

        assert await mapper.update(db_session, category) == 1

    @pytest.mark.asyncio
    async def test_collapse_path_splices_node_out(self, db_session, mapper, chain):
        a, b, c, d = chain

        await mapper.collapse_path(db_session, b)

        rows = await path_rows(db_session)
        assert (a, c, 1) in rows
        assert (a, d, 2) in rows
        assert not any(anc == b and desc != b for anc, desc, _ in rows)
        # b keeps its own rows until the caller removes them
        assert {(b, b, 0), (a, b, 1)} <= rows

    @pytest.mark.asyncio
    async def test_detach_and_attach(self, db_session, mapper, chain):
        a, b, c, d = chain
        other = await _insert(db_session, mapper, "Other", 0)

        await mapper.detach_path(db_session, c)
        assert {row for row in await path_rows(db_session) if row[1] in (c, d)} == {
            (c, c, 0),
            (d, d, 0),
            (c, d, 1),
        }

        await mapper.attach_path(db_session, c, other)
        assert {row for row in await path_rows(db_session) if row[1] == d} == {
            (d, d, 0),
            (c, d, 1),
            (other, d, 2),
        }

    @pytest.mark.asyncio
    async def test_delete_all_and_paths(self, db_session, mapper, chain):
        a, b, c, d = chain

        await mapper.delete_all(db_session, [c, d])
        await mapper.delete_paths(db_session, [c, d])

        assert await mapper.select_count(db_session) == 2
        assert await mapper.contains(db_session, c) is False
        assert {desc for _, desc, _ in await path_rows(db_session)} == {a, b}

    @pytest.mark.asyncio
    async def test_empty_batches_are_noops(self, db_session, mapper, chain):
        before = await path_rows(db_session)

        await mapper.delete_all(db_session, [])
        await mapper.delete_paths(db_session, [])
        await mapper.attach_path(db_session, chain[0], 0)

        assert await path_rows(db_session) == before
        assert await mapper.select_parent_map(db_session, []) == {}
