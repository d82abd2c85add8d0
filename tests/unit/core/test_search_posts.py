"""Unit tests for the SearchPosts orchestrator."""

from unittest.mock import AsyncMock

import pytest

from postboard.core.cache_aside import CacheAside
from postboard.core.errors import StoreFailureError, ValidationError
from postboard.core.search_posts import SearchPosts, SearchPostsQuery


@pytest.mark.asyncio
class TestSearchPosts:
    async def test_matches_company_or_content(self, spy_repo, cache_aside, post_factory, cities):
        hit_company = post_factory(company="Overtime Inc", content="nothing special here")
        hit_content = post_factory(company="Acme", content="forced overtime again")
        miss = post_factory(company="Acme", content="all good this week")
        for post in (hit_company, hit_content, miss):
            await spy_repo.save(post)

        page = await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery("overtime"))

        assert {p.id for p in page.items} == {hit_company.id, hit_content.id}
        assert page.total == 2

    async def test_keyword_normalized_for_key_and_store(self, spy_repo, memory_cache, cache_aside):
        use_case = SearchPosts(spy_repo, cache_aside)

        await use_case.execute(SearchPostsQuery("  TEST  "))
        await use_case.execute(SearchPostsQuery("test"))

        assert memory_cache.keys() == ["search:test:page:1"]
        assert spy_repo.search.await_count == 1
        assert spy_repo.search.await_args.args[0] == "test"

    async def test_city_filter_in_key_and_query(self, spy_repo, memory_cache, cache_aside, post_factory, cities):
        await spy_repo.save(post_factory(city=cities["beijing"], content="late salary payment"))
        await spy_repo.save(post_factory(city=cities["shanghai"], content="late salary payment"))

        page = await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery("salary", city_code="shanghai"))

        assert page.total == 1
        assert page.items[0].city.code == "shanghai"
        assert memory_cache.keys() == ["search:salary:city:shanghai:page:1"]
        assert spy_repo.search.await_args.args[1].name == "上海"

    @pytest.mark.parametrize("keyword", ["", "   ", "a", " b "])
    async def test_short_keywords_rejected(self, spy_repo, cache_aside, keyword):
        with pytest.raises(ValidationError):
            await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery(keyword))
        spy_repo.search.assert_not_called()

    async def test_two_character_keyword_accepted(self, spy_repo, cache_aside):
        page = await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery("加班"))
        assert page.total == 0

    async def test_results_cached_for_five_minutes(self, spy_repo, cache_aside, clock):
        use_case = SearchPosts(spy_repo, cache_aside)
        await use_case.execute(SearchPostsQuery("overtime"))
        clock.advance(299)
        await use_case.execute(SearchPostsQuery("overtime"))
        assert spy_repo.search.await_count == 1
        clock.advance(2)
        await use_case.execute(SearchPostsQuery("overtime"))
        assert spy_repo.search.await_count == 2

    async def test_paging_defaults(self, spy_repo, cache_aside):
        page = await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery("overtime", page=-1, page_size=0))
        assert (page.page, page.page_size) == (1, 20)

    async def test_cache_failure_never_surfaces(self, spy_repo, failing_cache):
        page = await SearchPosts(spy_repo, CacheAside(failing_cache, retry_attempts=1)).execute(
            SearchPostsQuery("overtime")
        )
        assert page.total == 0

    async def test_store_failure_wrapped(self, cache_aside):
        repo = AsyncMock()
        repo.search.side_effect = StoreFailureError("statement timeout")
        with pytest.raises(StoreFailureError) as info:
            await SearchPosts(repo, cache_aside).execute(SearchPostsQuery("overtime"))
        assert info.value.message == "failed to search posts"

    async def test_keyword_with_key_separator_rejected(self, spy_repo, memory_cache, cache_aside):
        await memory_cache.set("search:ab:city:beijing:page:1", '{"items": [], "total": 0, "page": 1, "page_size": 20}', 300)

        with pytest.raises(ValidationError):
            await SearchPosts(spy_repo, cache_aside).execute(SearchPostsQuery("ab:city:beijing"))
        spy_repo.search.assert_not_called()
