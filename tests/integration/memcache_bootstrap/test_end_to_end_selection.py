"""Integration tests for the bootstrap cache selection on a real filesystem."""

import copy
import re

import pytest

from memcache_bootstrap import (
    BootstrapCacheSelector,
    ClientLibrary,
    HostingEnvironment,
    SelectionOutcome,
    SelectorConfig,
    apply_memcache_settings,
)
from memcache_bootstrap.infrastructure.autoload import MetaPathAutoloader
from memcache_bootstrap.infrastructure.diagnostics import FileDiagnosticWriter
from memcache_bootstrap.infrastructure.testing import StaticExtensionRegistry

MEMCACHE_BACKEND = "cache.backend.memcache"


@pytest.fixture
def docroot(tmp_path):
    root = tmp_path / "docroot"
    module = root / "modules" / "contrib" / "memcache"
    (module / "src").mkdir(parents=True)
    (module / "memcache.services.yml").write_text("services: {}\n")
    return root


@pytest.fixture
def log_dir(tmp_path):
    directory = tmp_path / "mnt" / "mysite"
    directory.mkdir(parents=True)
    return directory


@pytest.fixture
def config(tmp_path, log_dir):
    return SelectorConfig(
        log_path_template=str(tmp_path / "mnt" / "{site_name}" / "cloud-memcache-8.x-2.0-error.log"),
        autoload_namespace="drupal_e2e.memcache",
    )


@pytest.fixture
def meta_path():
    return []


def _settings():
    return {
        "memcache": {"servers": {"10.0.0.5:11211": "default"}, "bins": {"default": "default"}},
        "container_yamls": [],
        "cache": {"bins": {"render": "cache.backend.database"}},
    }


def _selector(root, config, meta_path, libraries):
    return BootstrapCacheSelector(
        root,
        extension_registry=StaticExtensionRegistry(libraries),
        autoloader=MetaPathAutoloader(meta_path),
        diagnostic_writer=FileDiagnosticWriter(),
        config=config,
    )


class TestHostedWithModule:
    """Scenarios where the platform, servers and module are all present."""

    def test_single_library_integrates(self, docroot, config, meta_path, log_dir):
        """Test full rewiring with only the pure-Python client present."""
        settings = _settings()
        environment = HostingEnvironment(site_environment="prod", site_name="mysite")

        result = _selector(docroot, config, meta_path, [ClientLibrary.MEMCACHE]).select(environment, settings)

        assert result.outcome is SelectionOutcome.INTEGRATED
        for bin_name in ("bootstrap", "discovery", "config"):
            assert settings["cache"]["bins"][bin_name] == MEMCACHE_BACKEND
        assert settings["cache"]["bins"]["render"] == "cache.backend.database"
        assert settings["cache"]["default"] == MEMCACHE_BACKEND
        assert settings["memcache"]["stampede_protection"] is True
        assert "extension" not in settings["memcache"]
        assert settings["container_yamls"] == [
            str(docroot / "modules/contrib/memcache/memcache.services.yml"),
            "sites/all/memcache-locks.yml",
        ]
        assert len(settings["bootstrap_container_definition"]["services"]) == 8
        assert len(meta_path) == 1
        assert list(log_dir.iterdir()) == []

    def test_pylibmc_preferred(self, docroot, config, meta_path):
        """Test that pylibmc is recorded as the client extension."""
        settings = _settings()
        environment = HostingEnvironment(site_environment="test", site_name="mysite")

        _selector(docroot, config, meta_path, list(ClientLibrary)).apply(environment, settings)

        assert settings["memcache"]["extension"] == "pylibmc"

    def test_repeated_bootstrap_is_idempotent(self, docroot, config, meta_path):
        """Test that running the selection twice equals running it once."""
        environment = HostingEnvironment(site_environment="prod", site_name="mysite")
        selector = _selector(docroot, config, meta_path, [ClientLibrary.PYLIBMC])

        once = selector.apply(environment, _settings())
        twice = selector.apply(environment, copy.deepcopy(once))

        assert twice == once
        assert len(meta_path) == 1


class TestHostedWithoutModule:
    """Scenarios where integration is requested but prerequisites are missing."""

    def test_fallback_writes_one_line(self, tmp_path, config, meta_path, log_dir):
        """Test the diagnostic line and untouched settings."""
        settings = _settings()
        original = copy.deepcopy(settings)
        environment = HostingEnvironment(site_environment="prod", site_name="mysite")

        result = _selector(tmp_path / "empty", config, meta_path, list(ClientLibrary)).select(environment, settings)

        log_file = log_dir / "cloud-memcache-8.x-2.0-error.log"
        assert result.outcome is SelectionOutcome.FALLBACK
        assert result.log_path == log_file
        assert settings == original
        assert meta_path == []

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert re.fullmatch(
            r"\[\d{4}/\d{2}/\d{1,2} \d{2}:\d{2}:\d{2} UTC\] Could not enable memcache module integration: "
            r"integration requested but prerequisites missing",
            lines[0],
        )

    def test_unwritable_log_does_not_fail(self, tmp_path, meta_path):
        """Test that a missing log directory is silently ignored."""
        config = SelectorConfig(log_path_template=str(tmp_path / "nowhere" / "{site_name}" / "error.log"))
        settings = _settings()
        environment = HostingEnvironment(site_environment="prod", site_name="mysite")

        result = _selector(tmp_path, config, meta_path, []).select(environment, settings)

        assert result.outcome is SelectionOutcome.FALLBACK
        assert not (tmp_path / "nowhere").exists()


class TestNotHosted:
    """Scenarios where the selector must be a strict no-op."""

    @pytest.mark.parametrize(
        "environment,settings",
        [
            (HostingEnvironment(site_environment=None, site_name="mysite"), _settings()),
            (HostingEnvironment(site_environment="prod", site_name="mysite"), {"container_yamls": []}),
            (HostingEnvironment(site_environment="prod", site_name="mysite"), {"memcache": {"servers": []}}),
        ],
    )
    def test_noop(self, docroot, config, meta_path, log_dir, environment, settings):
        """Test that nothing is mutated and nothing is written."""
        original = copy.deepcopy(settings)

        result = _selector(docroot, config, meta_path, list(ClientLibrary)).select(environment, settings)

        assert result.outcome is SelectionOutcome.SKIPPED
        assert settings == original
        assert meta_path == []
        assert list(log_dir.iterdir()) == []

    def test_malformed_cache_setting_is_noop(self, docroot, config, meta_path, log_dir):
        """Test that a string cache setting does not half-apply the integration."""
        settings = {"memcache": {"servers": {"h:1": "default"}}, "cache": "bad"}
        original = copy.deepcopy(settings)
        environment = HostingEnvironment(site_environment="prod", site_name="mysite")

        result = _selector(docroot, config, meta_path, [ClientLibrary.PYLIBMC]).select(environment, settings)

        assert result.outcome is SelectionOutcome.SKIPPED
        assert settings == original
        assert meta_path == []
        assert list(log_dir.iterdir()) == []

    def test_public_entry_point_reads_environment(self, docroot, monkeypatch):
        """Test the top-level helper with the platform indicator unset."""
        monkeypatch.delenv("AH_SITE_ENVIRONMENT", raising=False)
        settings = _settings()
        original = copy.deepcopy(settings)

        apply_memcache_settings(settings, docroot)

        assert settings == original
