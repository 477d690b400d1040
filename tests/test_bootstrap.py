from bootstrap import build_engine_label, build_repositories
from config import Settings
from database import normalize_database_url
from populate_db import populate
from repositories.memory import InMemoryProductRepository
from repositories.sql import SqlProductRepository


class TestBackendSelection:

    def test_in_memory_flag(self, clock):
        repos = build_repositories(Settings(USE_IN_MEMORY_DB=True), clock)
        assert isinstance(repos.products, InMemoryProductRepository)
        assert repos.engine is None

    def test_relational_by_default(self, clock):
        repos = build_repositories(Settings(USE_IN_MEMORY_DB=False, DATABASE_URL="sqlite://"), clock)
        try:
            assert isinstance(repos.products, SqlProductRepository)
            assert repos.products.get_all() == []
        finally:
            repos.close()

    def test_engine_label_hides_credentials(self):
        assert build_engine_label("postgresql://app:secret@db:5432/inv") == "postgresql://db:5432/inv"
        assert build_engine_label("sqlite://") == "sqlite://"


class TestSettings:

    def test_postgres_scheme_rewritten(self):
        assert normalize_database_url("postgres://u:p@h/db") == "postgresql://u:p@h/db"
        assert normalize_database_url("sqlite:///x.db") == "sqlite:///x.db"

    def test_frontend_url_added_once(self):
        s = Settings(FRONTEND_URL="https://shop.example.com")
        assert s.allowed_origins[-1] == "https://shop.example.com"
        s = Settings(FRONTEND_URL="http://localhost:5173")
        assert s.allowed_origins.count("http://localhost:5173") == 1


class TestPopulate:

    def test_seeds_then_skips(self, repos):
        first = populate(repos, products_per_category=2)
        assert first == {"categories": 4, "products": 8, "skipped": 0}
        assert len(repos.categories.get_all()) == 4

        second = populate(repos, products_per_category=2)
        assert second["products"] == 0
        assert second["skipped"] == 12


class TestModuleLevelApp:

    def test_import_with_in_memory_flag_opens_no_database(self):
        import main

        assert main.app.state.repositories.engine is None
