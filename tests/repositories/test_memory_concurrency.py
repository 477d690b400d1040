"""The in-memory store under concurrent writers."""

from concurrent.futures import ThreadPoolExecutor

from bootstrap import in_memory_repositories
from domain.exceptions import ConflictError
from tests.fakes import make_product

WORKERS = 16


def _try_add(repos, sku):
    try:
        return repos.products.add(make_product(sku=sku))
    except ConflictError:
        return None


class TestConcurrentAdds:

    def test_same_sku_admits_exactly_one(self, clock):
        repos = in_memory_repositories(clock)
        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(lambda _: _try_add(repos, "SKU-001"), range(WORKERS)))

        stored = [r for r in results if r is not None]
        assert len(stored) == 1
        assert [p.sku for p in repos.products.get_all()] == ["SKU-001"]

    def test_distinct_skus_get_unique_ids(self, clock):
        repos = in_memory_repositories(clock)
        skus = [f"SKU-{i:03d}" for i in range(WORKERS * 4)]
        with ThreadPoolExecutor(max_workers=WORKERS) as pool:
            results = list(pool.map(lambda sku: _try_add(repos, sku), skus))

        ids = [p.id for p in results]
        assert len(set(ids)) == len(skus)
        assert sorted(ids) == list(range(1, len(skus) + 1))
