"""Tests for catalog search, filter and sort."""

import pytest

from tag_catalog.core.models.tag import TagCategory
from tag_catalog.core.services.catalog_service import TagCatalogService, TagSort


@pytest.fixture
async def catalog(sqlite_repo):
    for name, category in [
        ("Heavy Metal", TagCategory.CORE_GENRE),
        ("metalcore", TagCategory.SUB_GENRE),
        ("dreamy", TagCategory.MOOD),
        ("80s", TagCategory.ERA_VIBE),
        ("angry", TagCategory.MOOD),
    ]:
        await sqlite_repo.insert_if_absent(name, category)
    return TagCatalogService(sqlite_repo)


@pytest.mark.unit
async def test_default_sort_is_category_then_name(catalog):
    tags = await catalog.list_tags()

    assert [t.name for t in tags] == ["Heavy Metal", "80s", "angry", "dreamy", "metalcore"]


@pytest.mark.unit
async def test_name_sorts(catalog):
    az = [t.name for t in await catalog.list_tags(sort=TagSort.AZ)]
    za = [t.name for t in await catalog.list_tags(sort=TagSort.ZA)]

    assert az == ["80s", "Heavy Metal", "angry", "dreamy", "metalcore"]
    assert za == list(reversed(az))


@pytest.mark.unit
async def test_search_is_case_insensitive_substring(catalog):
    tags = await catalog.list_tags(query="  METAL ")

    assert [t.name for t in tags] == ["Heavy Metal", "metalcore"]


@pytest.mark.unit
async def test_category_filter_and_search_combine(catalog):
    only_mood = await catalog.list_tags(categories=[TagCategory.MOOD])
    mood_with_search = await catalog.list_tags(query="dre", categories={TagCategory.MOOD})
    no_filter = await catalog.list_tags(categories=[])

    assert [t.name for t in only_mood] == ["angry", "dreamy"]
    assert [t.name for t in mood_with_search] == ["dreamy"]
    assert len(no_filter) == 5
