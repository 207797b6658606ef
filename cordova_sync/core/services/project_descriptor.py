"""
Project descriptor — read/update/write of ``config.xml``.

Handles the parts of the descriptor cordova-sync cares about:

    <widget id="com.example.app" version="1.0.0" xmlns="http://www.w3.org/ns/widgets">
        <name>Example</name>
        <engine name="ios" spec="^7.0.0" />
        <plugin name="cordova-plugin-camera" spec="~6.0.0">
            <variable name="CAMERA_USAGE_DESCRIPTION" value="Take pictures" />
        </plugin>
        <hook type="before_plugin_rm" src="scripts/cleanup.sh" />
    </widget>

Mutators only change the in-memory tree. Nothing reaches disk until
``write()`` is called; callers call it after every batch they keep.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from xml.sax.saxutils import quoteattr
from pathlib import Path

from cordova_sync.core.config.loader import descriptor_path
from cordova_sync.core.errors import ConfigError, PersistenceError
from cordova_sync.core.models.item import Engine, PluginEntry

logger = logging.getLogger(__name__)

WIDGETS_NS = "http://www.w3.org/ns/widgets"
CDV_NS = "http://cordova.apache.org/ns/1.0"

ET.register_namespace("", WIDGETS_NS)
ET.register_namespace("cdv", CDV_NS)


_START_TAG = re.compile(r"<[^\s/>]+")


def _declared_namespaces(path: Path) -> list[tuple[str, str]]:
    """Every ``xmlns``/``xmlns:prefix`` declaration in the file, in order."""
    seen: list[tuple[str, str]] = []
    for _event, (prefix, uri) in ET.iterparse(path, events=("start-ns",)):
        if (prefix, uri) not in seen:
            seen.append((prefix, uri))
    return seen


def _register(namespaces: list[tuple[str, str]]) -> None:
    for prefix, uri in namespaces:
        try:
            ET.register_namespace(prefix, uri)
        except ValueError:
            # ns<digits> prefixes are reserved by ElementTree
            logger.debug("Cannot register namespace prefix %r", prefix)


def _redeclare_unused(body: str, namespaces: list[tuple[str, str]]) -> str:
    """Put back prefixed declarations ElementTree drops when nothing uses them."""
    match = _START_TAG.match(body)
    if match is None:
        return body
    head = body[: body.index(">")]
    extra = "".join(
        f" xmlns:{prefix}={quoteattr(uri)}"
        for prefix, uri in namespaces
        if prefix and f"xmlns:{prefix}=" not in head
    )
    return body[: match.end()] + extra + body[match.end():]


def local_name(tag: object) -> str | None:
    """Local part of an element tag; None for comments and PIs."""
    if not isinstance(tag, str):
        return None
    return tag.rsplit("}", 1)[-1]


class ProjectDescriptor:
    """The XML-backed config store."""

    def __init__(
        self,
        path: Path,
        tree: ET.ElementTree,
        namespaces: list[tuple[str, str]] | None = None,
    ):
        self._path = path
        self._tree = tree
        self._namespaces = namespaces or []   # (prefix, uri) as declared in the file
        self._root = tree.getroot()
        tag = self._root.tag
        self._ns = tag[1:].split("}", 1)[0] if tag.startswith("{") else ""
        self._modified = False

    # ── Loading ─────────────────────────────────────────────────

    @classmethod
    def load(cls, path: Path) -> ProjectDescriptor:
        """Parse a descriptor file.

        Raises:
            ConfigError: If the file is missing or not well-formed XML.
        """
        if not path.is_file():
            raise ConfigError(f"Project descriptor not found: {path}")

        parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True))
        try:
            tree = ET.parse(path, parser=parser)
            namespaces = _declared_namespaces(path)
        except ET.ParseError as e:
            raise ConfigError(f"Invalid XML in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        logger.debug("Loaded project descriptor %s", path)
        return cls(path, tree, namespaces)

    @classmethod
    def for_project(cls, project_root: Path) -> ProjectDescriptor:
        return cls.load(descriptor_path(project_root))

    @property
    def path(self) -> Path:
        return self._path

    @property
    def modified(self) -> bool:
        """Whether the tree holds mutations not yet written."""
        return self._modified

    # ── Helpers ─────────────────────────────────────────────────

    def _qname(self, local: str) -> str:
        return f"{{{self._ns}}}{local}" if self._ns else local

    def _children(self, local: str) -> list[ET.Element]:
        return [el for el in self._root if local_name(el.tag) == local]

    @staticmethod
    def _plugin_id(el: ET.Element) -> str | None:
        return el.get("name") or el.get("id")

    def _find_plugin(self, plugin_id: str) -> ET.Element | None:
        for el in self._children("plugin"):
            if self._plugin_id(el) == plugin_id:
                return el
        return None

    # ── Front matter ────────────────────────────────────────────

    def package_name(self) -> str | None:
        return self._root.get("id") or None

    def version(self) -> str | None:
        return self._root.get("version") or None

    def name(self) -> str | None:
        for el in self._children("name"):
            text = (el.text or "").strip()
            if text:
                return text
        return None

    # ── Engines ─────────────────────────────────────────────────

    def get_engines(self) -> list[Engine]:
        engines = []
        for el in self._children("engine"):
            name = el.get("name")
            if not name:
                continue
            engines.append(Engine(name=name, spec=el.get("spec") or el.get("version") or None))
        return engines

    def add_engine(self, name: str, spec: str | None = None) -> None:
        """Add an engine, or update the spec of an existing one."""
        for el in self._children("engine"):
            if el.get("name") == name:
                if spec and el.get("spec") != spec:
                    el.set("spec", spec)
                    self._modified = True
                return

        el = ET.SubElement(self._root, self._qname("engine"), {"name": name})
        if spec:
            el.set("spec", spec)
        self._modified = True

    def remove_engine(self, name: str) -> bool:
        """Remove every engine called *name*. Returns whether one was removed."""
        removed = False
        for el in self._children("engine"):
            if el.get("name") == name:
                self._root.remove(el)
                removed = True
        if removed:
            self._modified = True
        return removed

    # ── Plugins ─────────────────────────────────────────────────

    def get_plugin_id_list(self) -> list[str]:
        ids = []
        for el in self._children("plugin"):
            plugin_id = self._plugin_id(el)
            if plugin_id:
                ids.append(plugin_id)
        return ids

    def get_plugin(self, plugin_id: str) -> PluginEntry | None:
        el = self._find_plugin(plugin_id)
        if el is None:
            return None

        variables = {}
        for var in el:
            if local_name(var.tag) == "variable" and var.get("name"):
                variables[var.get("name")] = var.get("value", "")

        return PluginEntry(name=plugin_id, spec=el.get("spec") or None, variables=variables)

    def add_plugin(
        self,
        plugin_id: str,
        spec: str | None = None,
        variables: dict[str, str] | None = None,
    ) -> None:
        """Add a plugin, replacing any existing element with the same id."""
        existing = self.get_plugin(plugin_id)
        if existing is not None:
            if existing.spec == spec and existing.variables == (variables or {}):
                return
            self.remove_plugin(plugin_id)

        el = ET.SubElement(self._root, self._qname("plugin"), {"name": plugin_id})
        if spec:
            el.set("spec", spec)
        for var_name, value in (variables or {}).items():
            ET.SubElement(el, self._qname("variable"), {"name": var_name, "value": str(value)})
        self._modified = True

    def remove_plugin(self, plugin_id: str) -> bool:
        """Remove the plugin element. Returns whether one was removed."""
        removed = False
        for el in self._children("plugin"):
            if self._plugin_id(el) == plugin_id:
                self._root.remove(el)
                removed = True
        if removed:
            self._modified = True
        return removed

    # ── Hooks ───────────────────────────────────────────────────

    def get_hooks(self, event: str) -> list[str]:
        """Script paths declared by ``<hook type="event" src="...">``."""
        return [
            el.get("src")
            for el in self._children("hook")
            if el.get("type") == event and el.get("src")
        ]

    # ── Persistence ─────────────────────────────────────────────

    def write(self) -> None:
        """Write the whole document to disk immediately.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        _register(self._namespaces)
        ET.indent(self._tree, space="    ")
        body = _redeclare_unused(ET.tostring(self._root, encoding="unicode"), self._namespaces)
        try:
            self._path.write_text(
                "<?xml version='1.0' encoding='utf-8'?>\n" + body + "\n", encoding="utf-8",
            )
        except OSError as e:
            logger.error("Failed to write %s: %s", self._path, e)
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e
        self._modified = False
        logger.debug("Wrote project descriptor %s", self._path)
