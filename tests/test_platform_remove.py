"""
Tests for platform removal.
"""

from pathlib import Path

import pytest

from cordova_sync.core.config.loader import Settings
from cordova_sync.core.errors import UsageError
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.project_descriptor import ProjectDescriptor
from cordova_sync.core.use_cases.platform_remove import (
    remove_platforms,
    strip_version,
    uninstall_package_name,
)

BODY = '<engine name="android" spec="^12.0.0" /><engine name="ios" spec="^7.0.0" />'
PACKAGE = {
    "name": "app",
    "cordova": {"platforms": ["android", "ios"], "plugins": {}},
    "devDependencies": {"cordova-android": "^12.0.0", "cordova-ios": "^7.0.0"},
}


@pytest.fixture
def project(make_project) -> Path:
    root = make_project(BODY, package=PACKAGE, platforms=("android", "ios"), plugins=("cordova-plugin-device",))
    (root / "plugins" / "android.json").write_text("{}", encoding="utf-8")
    return root


class TestHelpers:
    def test_strip_version(self):
        assert strip_version("ios@7.0.0") == "ios"
        assert strip_version("ios") == "ios"
        assert strip_version("@acme/cordova-custom@1.0.0") == "@acme/cordova-custom"
        assert strip_version("@acme/cordova-custom") == "@acme/cordova-custom"

    def test_uninstall_package_name(self):
        settings = Settings()
        assert uninstall_package_name("android", settings) == "cordova-android"
        assert uninstall_package_name("ios@7.0.0", settings) == "cordova-ios"
        assert uninstall_package_name("cordova-custom", settings) == "cordova-custom"


class TestRemovePlatforms:
    def test_no_targets(self, project, mock_registry, settings):
        with pytest.raises(UsageError, match="No platform"):
            remove_platforms(project, [], settings=settings, registry=mock_registry)

    def test_removes_files_and_uninstalls(self, project, mock_registry, mock_adapter, settings):
        result = remove_platforms(project, ["android"], settings=settings, registry=mock_registry)

        assert result.report.status == "ok"
        assert not (project / "platforms" / "android").exists()
        assert not (project / "plugins" / "android.json").exists()
        assert (project / "platforms" / "ios").exists()

        (uninstall,) = mock_adapter.calls_for("uninstall")
        assert uninstall.action.adapter == "npm"
        assert uninstall.action.params == {"package": "cordova-android", "save": False}

    def test_nosave_keeps_declarations(self, project, mock_registry, settings):
        remove_platforms(project, ["android"], settings=settings, registry=mock_registry)
        assert PackageManifest.load(project).platforms == ["android", "ios"]
        assert "android" in [e.name for e in ProjectDescriptor.for_project(project).get_engines()]

    def test_save_removes_declarations(self, project, mock_registry, mock_adapter, settings):
        remove_platforms(
            project, ["ios@7.0.0"], options=CommandOptions(save=True), settings=settings, registry=mock_registry,
        )

        assert PackageManifest.load(project).platforms == ["android"]
        assert [e.name for e in ProjectDescriptor.for_project(project).get_engines()] == ["android"]
        assert mock_adapter.calls_for("uninstall")[0].action.params == {"package": "cordova-ios", "save": True}

    def test_npm_failure_isolated(self, project, mock_registry, mock_adapter, settings):
        mock_adapter.set_failure("uninstall:android", error="npm ERR!")

        result = remove_platforms(project, ["android", "ios"], settings=settings, registry=mock_registry)

        assert result.report.outcome("android").step == "npm_uninstall"
        assert result.report.outcome("ios").ok
        assert not (project / "platforms" / "ios").exists()
        assert result.exit_code == 1

    def test_dry_run(self, project, mock_registry, mock_adapter, settings):
        result = remove_platforms(
            project, ["android"], options=CommandOptions(dry_run=True, save=True),
            settings=settings, registry=mock_registry,
        )
        assert (project / "platforms" / "android").exists()
        assert PackageManifest.load(project).platforms == ["android", "ios"]
        assert mock_adapter.call_count == 0
        assert result.report.skipped == 1

    def test_hooks_fire(self, project, mock_registry, mock_adapter, settings):
        for event in ("before_platform_rm", "after_platform_rm"):
            (project / "hooks" / event).mkdir(parents=True)
            (project / "hooks" / event / "run.js").write_text("// hook\n")

        remove_platforms(project, ["ios@7.0.0"], settings=settings, registry=mock_registry)

        names = mock_adapter.called_names
        assert names[0] == "run:before_platform_rm:hooks/before_platform_rm/run.js"
        assert names[-1] == "run:after_platform_rm:hooks/after_platform_rm/run.js"
        assert mock_adapter.call_log[0].env["CORDOVA_PLATFORMS"] == "ios"
