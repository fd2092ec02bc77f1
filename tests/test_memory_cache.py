from adapters.cache.memory_cache import InMemoryStatsCache
from application.dto.domain_dto import DomainDTO
from application.dto.stats_dto import StatsDTO


class TestInMemoryStatsCache:
    def test_cold_cache_is_empty(self):
        cache = InMemoryStatsCache()

        assert cache.get_last_domains() == []
        assert cache.get_last_stats("a.com") == []

    def test_set_then_get_domains(self):
        cache = InMemoryStatsCache()
        domains = [DomainDTO("a.com", "active"), DomainDTO("b.com", "disabled")]

        cache.set_last_domains(domains)

        assert cache.get_last_domains() == domains

    def test_overwrite_replaces_previous_value(self):
        cache = InMemoryStatsCache()
        cache.set_last_stats("a.com", [StatsDTO(clicked_total=1)])
        cache.set_last_stats("a.com", [StatsDTO(clicked_total=2), StatsDTO(clicked_total=3)])

        assert [s.clicked_total for s in cache.get_last_stats("a.com")] == [2, 3]

    def test_entries_are_independent_per_domain(self):
        cache = InMemoryStatsCache()
        cache.set_last_stats("a.com", [StatsDTO(clicked_total=1)])

        assert cache.get_last_stats("b.com") == []

    def test_stored_lists_are_copies(self):
        cache = InMemoryStatsCache()
        domains = [DomainDTO("a.com", "active")]
        cache.set_last_domains(domains)

        domains.append(DomainDTO("b.com", "active"))
        cache.get_last_domains().clear()

        assert [d.name for d in cache.get_last_domains()] == ["a.com"]
