"""
Tests for plugin removal — id validation, per-platform uninstall, isolation.
"""

import json
from pathlib import Path

import pytest

from cordova_sync.core.errors import HookError, UsageError
from cordova_sync.core.models.action import Receipt
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.services.package_manifest import PackageManifest
from cordova_sync.core.services.project_descriptor import ProjectDescriptor
from cordova_sync.core.use_cases.plugin_remove import remove_plugins, validate_plugin_id

CAMERA = "cordova-plugin-camera"
DEVICE = "cordova-plugin-device"

BODY = f"""
    <engine name="android" />
    <engine name="ios" />
    <plugin name="{CAMERA}" spec="~6.0.0">
        <variable name="CAMERA_USAGE_DESCRIPTION" value="Take pictures" />
    </plugin>
    <plugin name="{DEVICE}" spec="^2.1.0" />
"""

PACKAGE = {
    "name": "app",
    "cordova": {
        "platforms": ["android", "ios"],
        "plugins": {CAMERA: {"CAMERA_USAGE_DESCRIPTION": "Take pictures"}, DEVICE: {}},
    },
}


@pytest.fixture
def project(make_project) -> Path:
    return make_project(BODY, package=PACKAGE, platforms=("android", "ios"), plugins=(CAMERA, DEVICE))


class TestValidatePluginId:
    def test_exact_id(self):
        assert validate_plugin_id(CAMERA, [CAMERA]) == CAMERA

    def test_prefix_retry(self):
        assert validate_plugin_id("camera", [CAMERA]) == CAMERA

    def test_prefix_not_doubled(self):
        assert validate_plugin_id("cordova-plugin-nope", ["cordova-plugin-cordova-plugin-nope"]) is None

    def test_unknown(self):
        assert validate_plugin_id("nope", [CAMERA]) is None

    def test_custom_prefix(self):
        assert validate_plugin_id("thing", ["acme-plugin-thing"], prefix="acme-plugin-") == "acme-plugin-thing"


class TestRemovePlugins:
    def test_no_targets(self, project, mock_registry, mock_adapter, settings):
        (project / "hooks" / "before_plugin_rm").mkdir(parents=True)
        (project / "hooks" / "before_plugin_rm" / "01.sh").write_text("#!/bin/sh\n")

        with pytest.raises(UsageError, match="No plugin specified"):
            remove_plugins(project, [], settings=settings, registry=mock_registry)
        assert mock_adapter.call_count == 0

    def test_unknown_id_fails_validation(self, project, mock_registry, mock_adapter, settings):
        result = remove_plugins(project, ["nope"], settings=settings, registry=mock_registry)

        outcome = result.report.outcome("nope")
        assert outcome.failed
        assert outcome.step == "validate"
        assert 'Plugin "nope" is not present in the project' in outcome.error
        assert mock_adapter.calls_for("plugin_uninstall_platform") == []
        assert mock_adapter.calls_for("plugin_uninstall") == []

    def test_plugin_dir_without_manifest_is_removable(self, project, mock_registry, mock_adapter, settings):
        (project / "plugins" / "cordova-plugin-bare").mkdir()

        result = remove_plugins(project, ["bare"], settings=settings, registry=mock_registry)

        assert result.report.outcome("cordova-plugin-bare") is None
        assert result.report.outcome("bare").ok
        assert mock_adapter.calls_for("plugin_uninstall")[0].action.params["plugin_id"] == "cordova-plugin-bare"

    def test_uninstalls_from_each_platform_then_package(self, project, mock_registry, mock_adapter, settings):
        result = remove_plugins(project, ["camera"], settings=settings, registry=mock_registry)

        assert result.report.status == "ok"
        assert mock_adapter.called_names == [
            f"plugin_uninstall_platform:{CAMERA}:android",
            f"plugin_uninstall_platform:{CAMERA}:ios",
            f"plugin_uninstall:{CAMERA}",
            "prepare:android,ios",
        ]
        assert mock_adapter.calls_for("prepare")[0].action.params["platforms"] == ["android", "ios"]

    def test_prepare_skipped_when_primitive_prepared(self, project, mock_registry, mock_adapter, settings):
        mock_adapter.set_response(
            "plugin_uninstall_platform",
            Receipt.success(adapter="cordova", action_id="x", metadata={"did_prepare": True}),
        )
        remove_plugins(project, [DEVICE], settings=settings, registry=mock_registry)
        assert mock_adapter.calls_for("prepare") == []

    def test_prepare_runs_once_for_many_targets(self, project, mock_registry, mock_adapter, settings):
        remove_plugins(project, [CAMERA, DEVICE], settings=settings, registry=mock_registry)
        assert len(mock_adapter.calls_for("prepare")) == 1

    def test_failure_isolated_per_target(self, project, mock_registry, mock_adapter, settings):
        mock_adapter.set_failure(f"plugin_uninstall_platform:{CAMERA}:ios", error="plugman failed")

        result = remove_plugins(project, [CAMERA, DEVICE], settings=settings, registry=mock_registry)

        camera = result.report.outcome(CAMERA)
        assert camera.failed
        assert camera.step == "uninstall:ios"
        assert result.report.outcome(DEVICE).ok
        assert f"plugin_uninstall:{CAMERA}" not in mock_adapter.called_names
        assert f"plugin_uninstall:{DEVICE}" in mock_adapter.called_names
        assert result.report.status == "partial"
        assert result.report.warnings == [f'Failed to remove plugin "{CAMERA}". Error: plugman failed']

    def test_variables_merged_per_platform(self, project, install_plugin, mock_registry, mock_adapter, settings):
        install_plugin(project, CAMERA, """
            <preference name="CAMERA_USAGE_DESCRIPTION" />
            <platform name="android">
                <preference name="ANDROIDX_VERSION" default="1.6.0" />
            </platform>
        """)
        options = CommandOptions(cli_variables={"UNRELATED": "x"})

        remove_plugins(project, [CAMERA], options=options, settings=settings, registry=mock_registry)

        android, ios = mock_adapter.calls_for("plugin_uninstall_platform")
        assert android.action.params["variables"] == {
            "CAMERA_USAGE_DESCRIPTION": "Take pictures",
            "ANDROIDX_VERSION": "1.6.0",
        }
        assert ios.action.params["variables"] == {"CAMERA_USAGE_DESCRIPTION": "Take pictures"}

    def test_missing_variable_fails_target(self, project, install_plugin, mock_registry, mock_adapter, settings):
        install_plugin(project, DEVICE, '<preference name="API_KEY" />')

        result = remove_plugins(project, [DEVICE], settings=settings, registry=mock_registry)

        outcome = result.report.outcome(DEVICE)
        assert outcome.step == "variables:android"
        assert "--variable API_KEY=value" in outcome.error
        assert mock_adapter.call_count == 0

    def test_save_persists_removal(self, project, mock_registry, settings):
        remove_plugins(project, [CAMERA], options=CommandOptions(save=True), settings=settings, registry=mock_registry)

        assert ProjectDescriptor.for_project(project).get_plugin_id_list() == [DEVICE]
        assert list(PackageManifest.load(project).plugins) == [DEVICE]

    def test_nosave_keeps_declarations(self, project, mock_registry, settings):
        remove_plugins(project, [CAMERA], settings=settings, registry=mock_registry)

        assert CAMERA in ProjectDescriptor.for_project(project).get_plugin_id_list()
        assert CAMERA in PackageManifest.load(project).plugins

    def test_fetch_metadata_removed(self, project, mock_registry, settings):
        fetch = project / "plugins" / "fetch.json"
        fetch.write_text(json.dumps({CAMERA: {"source": {}}, DEVICE: {"source": {}}}), encoding="utf-8")

        remove_plugins(project, [CAMERA], settings=settings, registry=mock_registry)

        assert list(json.loads(fetch.read_text(encoding="utf-8"))) == [DEVICE]

    def test_prepare_failure_is_reported(self, project, mock_registry, mock_adapter, settings):
        mock_adapter.set_failure("prepare", error="prepare broke")

        result = remove_plugins(project, [CAMERA], settings=settings, registry=mock_registry)

        prepare = result.report.outcome("prepare")
        assert prepare is not None and prepare.failed
        assert result.report.outcome(CAMERA).ok
        assert result.exit_code == 1


class TestRemovePluginHooks:
    def _hook(self, root: Path, event: str, name: str = "01.sh") -> str:
        hook_dir = root / "hooks" / event
        hook_dir.mkdir(parents=True, exist_ok=True)
        (hook_dir / name).write_text("#!/bin/sh\n")
        return f"hooks/{event}/{name}"

    def test_hooks_surround_removal(self, project, mock_registry, mock_adapter, settings):
        before = self._hook(project, "before_plugin_rm")
        after = self._hook(project, "after_plugin_rm")

        remove_plugins(project, [CAMERA], settings=settings, registry=mock_registry)

        names = mock_adapter.called_names
        assert names[0] == f"run:before_plugin_rm:{before}"
        assert names[-1] == f"run:after_plugin_rm:{after}"
        assert mock_adapter.call_log[0].env["CORDOVA_HOOK"] == "before_plugin_rm"

    def test_failing_hook_aborts(self, project, mock_registry, mock_adapter, settings):
        before = self._hook(project, "before_plugin_rm")
        mock_adapter.set_failure(f"run:before_plugin_rm:{before}", error="exit 2")

        with pytest.raises(HookError):
            remove_plugins(project, [CAMERA], settings=settings, registry=mock_registry)
        assert mock_adapter.calls_for("plugin_uninstall") == []
