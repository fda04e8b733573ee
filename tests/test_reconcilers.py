from unittest.mock import AsyncMock, MagicMock

import pytest

from conftest import local_ms
from photo_clusters.core.config import Config
from photo_clusters.domain.reconcilers import (
    NullMomentReconciler,
    RangeQueryMomentReconciler,
    WorkingSetMomentReconciler,
    select_moment_reconciler,
)
from photo_clusters.domain.sources.base import SourceCapabilities
from photo_clusters.domain.sources.memory import InMemoryAssetSource
from photo_clusters.schemas.asset import AssetPage, CoarseGroup
from photo_clusters.schemas.enum import ClusterKind
from photo_clusters.services.catalog import ClusterStore

PADDING_MS = 2 * 60 * 1000


@pytest.fixture
def moments():
    return [
        CoarseGroup(
            id="beach",
            start_time=local_ms(2024, 8, 3, 10, 0) / 1000,
            end_time=local_ms(2024, 8, 3, 12, 0) / 1000,
            location_names=["Brighton", "East Sussex"],
            reported_count=40,
        ),
        CoarseGroup(
            id="trip",
            start_time=local_ms(2024, 8, 10, 9, 0),
            end_time=local_ms(2024, 8, 12, 18, 0),
            reported_count=12,
        ),
        CoarseGroup(
            id="hidden",
            start_time=local_ms(2024, 8, 20, 9, 0),
            end_time=local_ms(2024, 8, 20, 10, 0),
            reported_count=8,
        ),
        CoarseGroup(
            id="summer",
            start_time=local_ms(2024, 6, 1, 0, 0),
            end_time=local_ms(2024, 8, 31, 0, 0),
            type="collection",
        ),
    ]


@pytest.fixture
def photos(make_asset):
    return [
        make_asset("t2", local_ms(2024, 8, 12, 17, 0)),
        make_asset("t1", local_ms(2024, 8, 10, 9, 30)),
        make_asset("edge", local_ms(2024, 8, 3, 12, 1)),
        make_asset("b2", local_ms(2024, 8, 3, 11, 0)),
        make_asset("b1", local_ms(2024, 8, 3, 10, 0)),
        make_asset("h1", local_ms(2024, 8, 20, 9, 30)),
    ]


@pytest.fixture
def limited_source(photos, moments):
    # "h1" exists in the library but lies outside the limited grant.
    return InMemoryAssetSource(
        assets=photos,
        coarse_groups=moments,
        accessible_ids=["t2", "t1", "edge", "b2", "b1"],
    )


@pytest.mark.asyncio
async def test_range_strategy_counts_accessible_photos(limited_source, photos):
    reconciler = RangeQueryMomentReconciler(limited_source, padding_ms=PADDING_MS)

    clusters = await reconciler.reconcile_moments([])

    assert [c.id for c in clusters] == ["moment_trip", "moment_beach"]
    trip, beach = clusters
    assert trip.count == 2
    assert trip.cover_uri == "file:///photos/t2.jpg"
    assert trip.asset_ids is None
    assert trip.album_id == "trip"
    # The padding keeps a photo one minute past the nominal end.
    assert beach.count == 3
    assert beach.cover_uri == "file:///photos/edge.jpg"


@pytest.mark.asyncio
async def test_range_strategy_titles(limited_source):
    clusters = await RangeQueryMomentReconciler(limited_source).reconcile_moments([])
    trip, beach = clusters

    assert beach.kind == ClusterKind.MOMENT
    assert beach.title == "Brighton"
    assert beach.subtitle == "2024-08-03"
    assert beach.start_time_ms == local_ms(2024, 8, 3, 10, 0)
    assert trip.title == "2024-08-10 – 2024-08-12"
    assert trip.subtitle is None


@pytest.mark.asyncio
async def test_range_strategy_uses_padded_bounds():
    source = MagicMock()
    group = CoarseGroup(id="m", start_time=60_000, end_time=1_000_000_000_000)
    source.list_coarse_groups = AsyncMock(return_value=[group])
    source.list_photos_in_range = AsyncMock(return_value=AssetPage(total_matched=0))

    clusters = await RangeQueryMomentReconciler(source, padding_ms=PADDING_MS).reconcile_moments([])

    assert clusters == []
    source.list_photos_in_range.assert_awaited_once_with(
        60_000_000 - PADDING_MS, 1_000_000_000_000 + PADDING_MS, page_size=1
    )


@pytest.mark.asyncio
async def test_range_strategy_clamps_padding_at_epoch():
    source = MagicMock()
    source.list_coarse_groups = AsyncMock(return_value=[CoarseGroup(id="m", start_time=0, end_time=10)])
    source.list_photos_in_range = AsyncMock(return_value=AssetPage(total_matched=0))

    await RangeQueryMomentReconciler(source, padding_ms=PADDING_MS).reconcile_moments([])

    assert source.list_photos_in_range.await_args.args[0] == 0


@pytest.mark.asyncio
async def test_range_strategy_ignores_reported_count(make_asset):
    group = CoarseGroup(id="m", start_time=local_ms(2024, 1, 1, 10, 0), end_time=local_ms(2024, 1, 1, 11, 0), reported_count=99)
    source = InMemoryAssetSource(
        assets=[make_asset("x", local_ms(2024, 1, 1, 10, 30))],
        coarse_groups=[group],
    )

    clusters = await RangeQueryMomentReconciler(source).reconcile_moments([])

    assert clusters[0].count == 1


@pytest.mark.asyncio
async def test_working_set_strategy_filters_without_padding(limited_source):
    working_set = [a for a in limited_source._visible()]
    reconciler = WorkingSetMomentReconciler(limited_source)

    clusters = await reconciler.reconcile_moments(working_set)

    assert [c.id for c in clusters] == ["moment_trip", "moment_beach"]
    trip, beach = clusters
    assert trip.asset_ids == ["t2", "t1"]
    assert beach.asset_ids == ["b2", "b1"]
    assert beach.count == 2
    assert beach.cover_uri == "file:///photos/b2.jpg"


@pytest.mark.asyncio
async def test_working_set_strategy_drops_moments_outside_working_set(limited_source, make_asset):
    working_set = [make_asset("t2", local_ms(2024, 8, 12, 17, 0))]

    clusters = await WorkingSetMomentReconciler(limited_source).reconcile_moments(working_set)

    assert [c.id for c in clusters] == ["moment_trip"]
    assert clusters[0].count == 1


@pytest.mark.asyncio
async def test_reconciliation_is_idempotent(limited_source):
    working_set = limited_source._visible()
    for reconciler in (RangeQueryMomentReconciler(limited_source), WorkingSetMomentReconciler(limited_source)):
        first = await reconciler.reconcile_moments(working_set)
        second = await reconciler.reconcile_moments(working_set)

        assert [(c.id, c.count, c.cover_uri) for c in first] == [(c.id, c.count, c.cover_uri) for c in second]


@pytest.mark.asyncio
async def test_moments_sorted_newest_first():
    groups = [
        CoarseGroup(id=str(i), start_time=local_ms(2024, 1, day, 12, 0), end_time=local_ms(2024, 1, day, 13, 0))
        for i, day in enumerate([3, 9, 1, 9, 5])
    ]
    source = MagicMock()
    source.list_coarse_groups = AsyncMock(return_value=groups)
    source.list_photos_in_range = AsyncMock(
        return_value=AssetPage(
            assets=[{"id": "x", "uri": "file:///x.jpg", "creation_time": 1}],
            total_matched=1,
        )
    )

    clusters = await RangeQueryMomentReconciler(source).reconcile_moments([])

    starts = [c.start_time_ms for c in clusters]
    assert starts == sorted(starts, reverse=True)
    assert {c.id for c in clusters[:2]} == {"moment_1", "moment_3"}


@pytest.mark.asyncio
async def test_inverted_moment_is_skipped(make_asset):
    group = CoarseGroup(id="bad", start_time=local_ms(2024, 1, 2, 0, 0), end_time=local_ms(2024, 1, 1, 0, 0))
    source = InMemoryAssetSource(assets=[make_asset("x", local_ms(2024, 1, 1, 12, 0))], coarse_groups=[group])

    assert await RangeQueryMomentReconciler(source).reconcile_moments([]) == []


@pytest.mark.asyncio
async def test_null_reconciler():
    assert await NullMomentReconciler().reconcile_moments([]) == []


@pytest.mark.parametrize(
    "capabilities, strategy, expected",
    [
        (SourceCapabilities(coarse_groups=False), "auto", NullMomentReconciler),
        (SourceCapabilities(coarse_groups=True), "none", NullMomentReconciler),
        (SourceCapabilities(coarse_groups=True, range_queries=True), "auto", RangeQueryMomentReconciler),
        (SourceCapabilities(coarse_groups=True, range_queries=False), "auto", WorkingSetMomentReconciler),
        (SourceCapabilities(coarse_groups=True, range_queries=True), "working_set", WorkingSetMomentReconciler),
        (SourceCapabilities(coarse_groups=True, range_queries=False), "range", RangeQueryMomentReconciler),
    ],
)
def test_select_moment_reconciler(capabilities, strategy, expected):
    source = InMemoryAssetSource(capabilities=capabilities)

    assert isinstance(select_moment_reconciler(source, strategy), expected)


@pytest.mark.asyncio
async def test_range_moment_count_matches_fetchable_photos(make_asset):
    group = CoarseGroup(id="party", start_time=local_ms(2024, 3, 1, 20, 0), end_time=local_ms(2024, 3, 1, 23, 0))
    source = InMemoryAssetSource(
        assets=[make_asset(f"p{i}", local_ms(2024, 3, 1, 21, i)) for i in range(5)],
        coarse_groups=[group],
    )
    config = Config(_env_file=None, MAX_ASSETS=3, PAGE_SIZE=2, ASSET_SOURCE_TYPE="memory")
    store = ClusterStore(source, config=config)

    await store.reload()
    moment = store.get_cluster("moment_party")
    photos = await store.load_cluster_photos("moment_party")

    assert moment.count == 3
    assert len(photos) == moment.count
