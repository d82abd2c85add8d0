"""Unit tests for configuration loading."""

from postboard.core.keys import TTLPolicy
from postboard.utils.config import PostboardConfig


class TestPostboardConfig:
    def test_defaults(self):
        config = PostboardConfig()

        assert config.rate_limit.post_limit == 3
        assert config.rate_limit.post_window_seconds == 3600
        assert config.cache.enabled is True
        assert config.cache.scan_count == 100
        assert config.resilience.request_timeout_seconds is None
        assert config.cache.ttl_policy() == TTLPolicy()

    def test_from_dict_overrides_sections(self):
        config = PostboardConfig.from_dict(
            {
                "redis": {"url": "redis://cache:6379/1"},
                "cache": {"search_ttl_seconds": 60, "popular_cities": ["hangzhou"]},
                "cities": {"xian": "西安"},
            }
        )

        assert config.redis.url == "redis://cache:6379/1"
        assert config.database.pool_size == 20
        ttl = config.cache.ttl_policy()
        assert ttl.search_seconds == 60
        assert ttl.for_list("hangzhou") == 300
        assert ttl.for_list("beijing") == 600
        directory = config.city_directory()
        assert directory.name_for("xian") == "西安"
        assert directory.name_for("beijing") == "北京"

    def test_from_env(self):
        config = PostboardConfig.from_env(
            {
                "POSTBOARD_REDIS_URL": "redis://redis:6379/0",
                "POSTBOARD_CACHE_ENABLED": "false",
                "POSTBOARD_CACHE_POPULAR_CITIES": "beijing, chengdu",
                "POSTBOARD_RATE_LIMIT_POST_LIMIT": "10",
                "POSTBOARD_RESILIENCE_RETRY_BACKOFF_MS": "10,20",
                "POSTBOARD_RESILIENCE_CACHE_RESET_TIMEOUT_SECONDS": "2.5",
                "POSTBOARD_RESILIENCE_REQUEST_TIMEOUT_SECONDS": "1.5",
                "POSTBOARD_LOGGING_FORMAT": "text",
                "UNRELATED": "ignored",
            }
        )

        assert config.redis.url == "redis://redis:6379/0"
        assert config.cache.enabled is False
        assert config.cache.popular_cities == ["beijing", "chengdu"]
        assert config.rate_limit.post_limit == 10
        assert config.resilience.retry_backoff_ms == [10, 20]
        assert config.resilience.cache_reset_timeout_seconds == 2.5
        assert config.resilience.request_timeout_seconds == 1.5
        assert config.logging.format == "text"

    def test_from_env_empty_uses_defaults(self):
        assert PostboardConfig.from_env({}) == PostboardConfig()
