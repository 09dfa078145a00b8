"""test suite for podspec repositories and the podspec cache."""
import httpx
import pytest
import shutil
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from podsmith.domain.errors import RepositoryError
from podsmith.repository.cache import LocalCache
from podsmith.repository.client import ChainedSpecRepository
from podsmith.repository.github import GitHubSpecRepository
from podsmith.repository.local import LocalSpecRepository


BASE_URL = "https://specs.example.com/main"

INDEX = {
    "JSONKit": {
        "versions": {
            "1.4": {"path": "Specs/JSONKit/1.4/JSONKit.podspec"},
            "1.5": {"path": "moved/JSONKit-1.5.podspec"},
        }
    },
    "Empty": {},
}


def write_podspec(repo: Path, name: str, version: str, body: str = "") -> Path:
    path = repo / name / version / f"{name}.podspec"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f'name "{name}"\nversion "{version}"\n{body}')
    return path


class TestLocalCache:
    @pytest.fixture
    def temp_cache_dir(self):
        """create a temporary cache directory."""
        temp_dir = Path(tempfile.mkdtemp())
        yield temp_dir
        # cleanup
        if temp_dir.exists():
            shutil.rmtree(temp_dir)

    @pytest.fixture
    def cache(self, temp_cache_dir):
        return LocalCache(temp_cache_dir)

    def test_cache_creation(self, temp_cache_dir):
        cache = LocalCache(temp_cache_dir / "nested")
        assert cache.cache_dir.exists()

    def test_get_definition_path(self, cache):
        path = cache.get_definition_path("JSONKit", "1.4")
        assert path.parent.name == "JSONKit"
        assert path.name == "1.4.podspec"

    def test_has_definition(self, cache):
        assert not cache.has_definition("JSONKit", "1.4")
        cache.store("JSONKit", "1.4", b"cached")
        assert cache.has_definition("JSONKit", "1.4")

    def test_store_replaces_atomically(self, cache):
        path = cache.store("JSONKit", "1.4", b"first")
        assert cache.store("JSONKit", "1.4", b"second") == path
        assert path.read_bytes() == b"second"
        assert list(path.parent.iterdir()) == [path]

    def test_clear_cache(self, cache, temp_cache_dir):
        for i in range(3):
            cache.store(f"pod{i}", "1.0", f"podspec {i}".encode())

        cache.clear()

        # cache dir should be recreated but empty
        assert temp_cache_dir.exists()
        assert list(temp_cache_dir.iterdir()) == []


class TestLocalSpecRepository:
    def test_versions(self, tmp_path):
        write_podspec(tmp_path, "JSONKit", "1.4")
        write_podspec(tmp_path, "JSONKit", "1.5")
        # a version directory without a podspec is not published
        (tmp_path / "JSONKit" / "2.0").mkdir()

        repository = LocalSpecRepository(tmp_path)
        assert repository.get_versions("JSONKit") == ["1.4", "1.5"]
        assert repository.get_versions("Unknown") == []

    def test_definition_path(self, tmp_path):
        path = write_podspec(tmp_path, "JSONKit", "1.4")
        assert LocalSpecRepository(tmp_path).get_definition_path("JSONKit", "1.4") == path

    def test_missing_definition(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            LocalSpecRepository(tmp_path).get_definition_path("JSONKit", "9.9")


class TestChainedSpecRepository:
    def test_earlier_repository_wins(self, tmp_path):
        vetted = tmp_path / "vetted"
        fetched = tmp_path / "fetched"
        vetted_path = write_podspec(vetted, "JSONKit", "1.4", 'summary "vetted"\n')
        write_podspec(fetched, "JSONKit", "1.4", 'summary "fetched"\n')
        fetched_path = write_podspec(fetched, "JSONKit", "1.5")

        repository = ChainedSpecRepository([LocalSpecRepository(vetted), LocalSpecRepository(fetched)])

        assert repository.get_versions("JSONKit") == ["1.4", "1.5"]
        assert repository.get_definition_path("JSONKit", "1.4") == vetted_path
        assert repository.get_definition_path("JSONKit", "1.5") == fetched_path

    def test_missing_everywhere(self, tmp_path):
        repository = ChainedSpecRepository([LocalSpecRepository(tmp_path)])
        with pytest.raises(FileNotFoundError):
            repository.get_definition_path("JSONKit", "1.4")


class TestGitHubSpecRepository:
    @pytest.fixture
    def requests(self):
        return []

    @pytest.fixture
    def client(self, requests):
        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request.url.path)
            path = request.url.path
            if path.endswith("/index.json"):
                return httpx.Response(200, json=INDEX)
            if path.endswith("/Specs/JSONKit/1.4/JSONKit.podspec"):
                return httpx.Response(200, text='name "JSONKit"\nversion "1.4"\n')
            if path.endswith("/Specs/JSONKit/1.5/JSONKit.podspec"):
                return httpx.Response(200, text='name "JSONKit"\nversion "1.5"\n')
            return httpx.Response(404)

        return httpx.Client(transport=httpx.MockTransport(handler))

    @pytest.fixture
    def repository(self, tmp_path, client):
        return GitHubSpecRepository(BASE_URL + "/", LocalCache(tmp_path / "cache"), client)

    def test_versions(self, repository):
        assert repository.get_versions("JSONKit") == ["1.4", "1.5"]
        assert repository.get_versions("Empty") == []
        assert repository.get_versions("Unknown") == []

    def test_index_fetched_once(self, repository, requests):
        repository.get_versions("JSONKit")
        repository.get_versions("Empty")
        assert requests.count("/main/index.json") == 1

    def test_definition_downloaded_and_cached(self, repository, requests, tmp_path):
        path = repository.get_definition_path("JSONKit", "1.4")
        assert path == tmp_path / "cache" / "JSONKit" / "1.4.podspec"
        assert 'version "1.4"' in path.read_text()

        requests.clear()
        assert repository.get_definition_path("JSONKit", "1.4") == path
        assert requests == []

    def test_falls_back_to_conventional_layout(self, repository, requests):
        path = repository.get_definition_path("JSONKit", "1.5")
        assert 'version "1.5"' in path.read_text()
        assert "/main/moved/JSONKit-1.5.podspec" in requests
        assert "/main/Specs/JSONKit/1.5/JSONKit.podspec" in requests

    def test_unknown_version(self, repository):
        with pytest.raises(FileNotFoundError):
            repository.get_definition_path("JSONKit", "9.9")

    def test_unreachable_index(self, tmp_path):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        repository = GitHubSpecRepository(BASE_URL, LocalCache(tmp_path), client)
        with pytest.raises(RepositoryError, match="index.json"):
            repository.get_versions("JSONKit")

    def test_refresh_refetches_index(self, repository, requests):
        repository.get_versions("JSONKit")
        repository.refresh()
        assert requests.count("/main/index.json") == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
