"""
Tests for the restore use cases — reconcile, skip installed, add the rest.
"""

import json

from cordova_sync.core.config.loader import Settings
from cordova_sync.core.models.options import CommandOptions
from cordova_sync.core.persistence.audit import AuditWriter
from cordova_sync.core.use_cases.restore import restore_all, restore_platforms, restore_plugins

PLATFORMS_BODY = '<engine name="android" /><engine name="ios" spec="^7.0.0" />'
PLUGINS_BODY = """
    <plugin name="cordova-plugin-camera" spec="~6.0.0">
        <variable name="CAMERA_USAGE_DESCRIPTION" value="Take pictures" />
    </plugin>
    <plugin name="cordova-plugin-device" spec="https://github.com/apache/cordova-plugin-device.git" />
"""


class TestRestorePlatforms:
    def test_adds_missing_platforms_in_order(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app", "cordova": {"platforms": ["android"]}})

        result = restore_platforms(root, settings=settings, registry=mock_registry)

        assert mock_adapter.called_names == ["platform_add:android", "platform_add:ios"]
        sources = [ctx.action.params["source"] for ctx in mock_adapter.call_log]
        assert sources == ["android", "ios@^7.0.0"]
        assert result.report.status == "ok"
        assert result.exit_code == 0

    def test_primitives_do_not_save(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app"})
        restore_platforms(root, settings=settings, registry=mock_registry)
        assert all(ctx.action.params["save"] is False for ctx in mock_adapter.call_log)

    def test_fully_installed_project_installs_nothing(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app"}, platforms=("android", "ios"))

        result = restore_platforms(root, settings=settings, registry=mock_registry)

        assert mock_adapter.call_count == 0
        assert result.report.skipped == 2
        assert result.report.status == "ok"

    def test_failure_does_not_stop_later_platforms(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app"})
        mock_adapter.set_failure("platform_add:android", error="gradle not found")

        result = restore_platforms(root, settings=settings, registry=mock_registry)

        assert mock_adapter.called_names == ["platform_add:android", "platform_add:ios"]
        assert result.report.failed_names == ["android"]
        assert result.report.status == "partial"
        assert result.exit_code == 1
        assert result.report.warnings == [
            'Failed to restore platform "android". You might need to try adding it again. '
            "Error: gradle not found"
        ]

    def test_targets_filter(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app"})
        result = restore_platforms(root, ["ios"], settings=settings, registry=mock_registry)
        assert mock_adapter.called_names == ["platform_add:ios"]
        assert result.report.outcome("android").reason == "not targeted"

    def test_reconciles_before_installing(self, make_project, read_package, mock_registry, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app", "cordova": {"platforms": ["android"]}})
        result = restore_platforms(root, settings=settings, registry=mock_registry)

        assert read_package(root)["cordova"]["platforms"] == ["android", "ios"]
        assert result.reconciled[0].migrated == ["ios"]

    def test_dry_run_changes_nothing(self, make_project, read_package, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY, package={"name": "app"})

        result = restore_platforms(
            root, options=CommandOptions(dry_run=True), settings=settings, registry=mock_registry,
        )

        assert mock_adapter.call_count == 0
        assert result.report.skipped == 2
        assert read_package(root) == {"name": "app"}

    def test_writes_audit_entry(self, make_project, mock_registry):
        root = make_project(PLATFORMS_BODY, package={"name": "app"})
        restore_platforms(root, settings=Settings(audit=True), registry=mock_registry)

        entries = AuditWriter(project_root=root).read_all()
        assert len(entries) == 1
        assert entries[0].operation_type == "platform_restore"
        assert entries[0].items_succeeded == 2


class TestRestorePlugins:
    def test_adds_plugins_with_variables(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLUGINS_BODY, package={"name": "app"})

        options = CommandOptions(searchpath=["../local-plugins"])
        result = restore_plugins(root, options=options, settings=settings, registry=mock_registry)

        assert result.report.status == "ok"
        camera, device = mock_adapter.call_log
        assert camera.action.params["source"] == "cordova-plugin-camera@~6.0.0"
        assert camera.action.params["variables"] == {"CAMERA_USAGE_DESCRIPTION": "Take pictures"}
        assert camera.action.params["searchpath"] == ["../local-plugins"]
        assert device.action.params["source"] == "https://github.com/apache/cordova-plugin-device.git"

    def test_cli_variables_overlay_declared_ones(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLUGINS_BODY, package={"name": "app"})
        options = CommandOptions(cli_variables={"CAMERA_USAGE_DESCRIPTION": "Scan codes"})
        restore_plugins(root, ["cordova-plugin-camera"], options=options, settings=settings, registry=mock_registry)

        (camera,) = mock_adapter.call_log
        assert camera.action.params["variables"] == {"CAMERA_USAGE_DESCRIPTION": "Scan codes"}

    def test_installed_plugins_skipped(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLUGINS_BODY, package={"name": "app"}, plugins=("cordova-plugin-camera",))
        restore_plugins(root, settings=settings, registry=mock_registry)
        assert mock_adapter.called_names == ["plugin_add:cordova-plugin-device"]

    def test_failure_message(self, make_project, mock_registry, mock_adapter, settings):
        root = make_project(PLUGINS_BODY, package={"name": "app"})
        mock_adapter.set_failure("plugin_add:cordova-plugin-camera", error="404")

        result = restore_plugins(root, settings=settings, registry=mock_registry)

        assert mock_adapter.call_count == 2
        assert result.report.warnings[0].startswith('Failed to restore plugin "cordova-plugin-camera".')


class TestRestoreAll:
    def test_platforms_then_plugins(self, make_project, read_package, mock_registry, mock_adapter, settings):
        root = make_project(PLATFORMS_BODY + PLUGINS_BODY, package={"name": "app"})

        result = restore_all(root, settings=settings, registry=mock_registry)

        assert [ctx.action.capability for ctx in mock_adapter.call_log] == [
            "platform_add", "platform_add", "plugin_add", "plugin_add",
        ]
        assert result.report.operation == "restore"
        assert result.report.total == 4
        assert len(result.reconciled) == 2

        data = result.to_dict()
        json.dumps(data)
        assert data["status"] == "ok"
        assert read_package(root)["cordova"]["plugins"]["cordova-plugin-device"] == {}
