"""
Specifier parsing — version range vs. install location.

A specifier is whatever a declaration carries next to the item name:
``^7.0.0``, ``~1.2``, ``1.x``, ``https://github.com/org/repo.git``,
``../local/plugin``, ``file:vendor/thing.tgz``...

Ranges are validated with npm's loose range rules (node-semver).
Anything that does not parse as a range is an install location.
Parsing never raises.
"""

from __future__ import annotations

import logging

import nodesemver

from cordova_sync.core.models.item import SpecifierKind

logger = logging.getLogger(__name__)


def is_version_range(spec: str | None) -> bool:
    """Whether *spec* is a valid semver range under loose rules."""
    if not spec:
        return False
    try:
        return nodesemver.valid_range(spec, True) is not None
    except Exception as e:
        logger.debug("Specifier %r is not a range: %s", spec, e)
        return False


def classify(spec: str | None) -> SpecifierKind:
    """Classify a specifier string."""
    if not spec:
        return SpecifierKind.NONE
    if is_version_range(spec):
        return SpecifierKind.RANGE
    return SpecifierKind.LOCATION


def install_source(name: str, spec: str | None) -> str:
    """Build what the install primitive receives for *name*.

    - no spec           → ``name``
    - semver range      → ``name@spec``
    - anything else     → ``spec`` (git URL, tarball, local path)
    """
    kind = classify(spec)
    if kind is SpecifierKind.NONE:
        return name
    if kind is SpecifierKind.RANGE:
        return f"{name}@{spec}"
    return spec  # type: ignore[return-value]
