"""
Tests for the hook runner.
"""

import os
import stat
from pathlib import Path

import pytest

from cordova_sync.adapters.registry import AdapterRegistry
from cordova_sync.adapters.shell.hook_script import HookScriptAdapter
from cordova_sync.core.errors import HookError
from cordova_sync.core.services.hooks import HookRunner
from cordova_sync.core.services.project_descriptor import ProjectDescriptor


def _script(root: Path, rel: str, body: str = "#!/bin/sh\nexit 0\n") -> Path:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR)
    return path


class TestScriptDiscovery:
    def test_descriptor_hooks_first_then_sorted_dir(self, make_project, mock_registry):
        root = make_project('<hook type="before_plugin_rm" src="scripts/first.sh" />')
        _script(root, "hooks/before_plugin_rm/20_b.sh")
        _script(root, "hooks/before_plugin_rm/10_a.sh")
        _script(root, "hooks/before_plugin_rm/.hidden")

        runner = HookRunner(root, mock_registry, ProjectDescriptor.for_project(root))

        assert runner.scripts_for("before_plugin_rm") == [
            "scripts/first.sh",
            "hooks/before_plugin_rm/10_a.sh",
            "hooks/before_plugin_rm/20_b.sh",
        ]

    def test_no_scripts(self, make_project, mock_registry, mock_adapter):
        root = make_project()
        assert HookRunner(root, mock_registry).fire("after_platform_rm") == []
        assert mock_adapter.call_count == 0


class TestFire:
    def test_env(self, make_project, mock_registry, mock_adapter):
        root = make_project()
        _script(root, "hooks/before_platform_rm/a.sh")

        HookRunner(root, mock_registry, cmdline="cordova-sync platform rm ios").fire(
            "before_platform_rm", platforms=["ios", "android"],
        )

        env = mock_adapter.call_log[0].env
        assert env["CORDOVA_HOOK"] == "before_platform_rm"
        assert env["CORDOVA_PLATFORMS"] == "ios,android"
        assert env["CORDOVA_PLUGINS"] == ""
        assert env["CORDOVA_CMDLINE"] == "cordova-sync platform rm ios"

    def test_failure_raises(self, make_project, mock_registry, mock_adapter):
        root = make_project()
        _script(root, "hooks/before_platform_rm/a.sh")
        _script(root, "hooks/before_platform_rm/b.sh")
        mock_adapter.set_failure("run:before_platform_rm:hooks/before_platform_rm/a.sh", error="exit 3")

        with pytest.raises(HookError, match="exit 3") as exc:
            HookRunner(root, mock_registry).fire("before_platform_rm")

        assert exc.value.event == "before_platform_rm"
        assert mock_adapter.call_count == 1


@pytest.mark.skipif(os.name == "nt", reason="POSIX shell scripts")
class TestRealScripts:
    def _registry(self) -> AdapterRegistry:
        registry = AdapterRegistry()
        registry.register(HookScriptAdapter())
        return registry

    def test_runs_executable(self, make_project):
        root = make_project()
        _script(root, "hooks/after_plugin_rm/touch.sh", '#!/bin/sh\necho "$CORDOVA_HOOK" > "$1/hook.out"\n')

        HookRunner(root, self._registry()).fire("after_plugin_rm")

        assert (root / "hook.out").read_text().strip() == "after_plugin_rm"

    def test_nonzero_exit_raises(self, make_project):
        root = make_project()
        _script(root, "hooks/after_plugin_rm/fail.sh", "#!/bin/sh\necho broken >&2\nexit 1\n")

        with pytest.raises(HookError, match="broken"):
            HookRunner(root, self._registry()).fire("after_plugin_rm")
