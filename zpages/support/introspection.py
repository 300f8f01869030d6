"""Process introspection for /support/env, /support/version and /support/info."""

import logging
import os
from importlib import metadata
from typing import Iterable, List, Mapping, Optional

from zpages.status.schemas import Env, Version

logger = logging.getLogger(__name__)


def collect_env(environ: Optional[Mapping[str, str]] = None) -> List[Env]:
    """All process environment variables as {name, value} pairs, in environment order."""
    env = os.environ if environ is None else environ
    return [Env(name=k, value=v) for k, v in list(env.items())]


def installed_version(distribution: str) -> Optional[str]:
    try:
        return metadata.version(distribution)
    except metadata.PackageNotFoundError:
        return None


def build_version(module: str, version: Optional[str], dependencies: Iterable[str] = ()) -> Version:
    """Version for ``module`` plus installed versions of ``dependencies``; missing ones are skipped.

    When ``version`` is empty, the installed distribution version of ``module`` is used.
    """
    resolved = version or installed_version(module) or "0.0.0"
    deps: List[Version] = []
    for name in dependencies:
        v = installed_version(name)
        if v is None:
            logger.debug("dependency %s not installed; omitted from version info", name)
            continue
        deps.append(Version(module=name, version=v))
    return Version(module=module, version=resolved, dependencies=deps or None)
