"""Unified config: service identity, server, logging, version info.

Defaults: loaded from zpages/config/defaults.yaml (single source of truth, no code-level defaults).
Logging settings can be overridden at startup by LOGLEVEL, LOGAS and DEBUGLEVEL.
"""

import logging
import os
import socket
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_DEFAULTS_PATH = Path(__file__).resolve().parent / "defaults.yaml"

# Lazy-loaded defaults
_DEFAULT_CONFIG: Optional[Dict[str, Any]] = None


def _load_default_config() -> Dict[str, Any]:
    """Load defaults.yaml. No code-level defaults."""
    global _DEFAULT_CONFIG
    if _DEFAULT_CONFIG is None:
        with open(_DEFAULTS_PATH, encoding="utf-8") as f:
            _DEFAULT_CONFIG = yaml.safe_load(f) or {}
    return _DEFAULT_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def merged_config(cfg: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Merge config with defaults so missing keys come from defaults.yaml."""
    return _deep_merge(_load_default_config(), cfg or {})


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """Load YAML config. Returns (config, resolved_path); path is None when only defaults apply."""
    config_path = config_path or os.environ.get("ZPAGES_CONFIG", "config/config.yaml")
    if not Path(config_path).exists():
        logger.info("Config %s not found; using defaults", config_path)
        return merged_config({}), None
    resolved = str(Path(config_path).resolve())
    with open(resolved, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}
    return merged_config(config), resolved


def _section(cfg: Dict[str, Any], section: str) -> Dict[str, Any]:
    s = merged_config(cfg).get(section)
    return dict(s) if isinstance(s, dict) else {}


def get_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return {host, port}."""
    server = _section(config or {}, "server")
    return {"host": str(server.get("host")), "port": int(server.get("port"))}


def get_service_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return service identity {name, type, guid, uri}. uri defaults to http://<host>:<port>."""
    cfg = config or {}
    service = _section(cfg, "service")
    uri = service.get("uri")
    if not uri:
        server = get_server_config(cfg)
        host = server["host"]
        if host in ("0.0.0.0", "::", ""):
            host = socket.gethostname()
        uri = f"http://{host}:{server['port']}"
    return {
        "name": service.get("name"),
        "type": service.get("type"),
        "guid": service.get("guid") or None,
        "uri": uri,
    }


def get_version_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return {module, version, dependencies}."""
    version = _section(config or {}, "version")
    return {
        "module": version.get("module"),
        "version": version.get("version") or None,
        "dependencies": [d for d in (version.get("dependencies") or []) if d],
    }


def _parse_debug_level(raw: Any) -> int:
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        logger.error("error converting DEBUGLEVEL %s: not an integer; using 0", raw)
        return 0


def get_logging_config(
    config: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Return {level, format, debug}. LOGLEVEL, LOGAS, DEBUGLEVEL override the logging section."""
    env = os.environ if environ is None else environ
    section = _section(config or {}, "logging")
    level = env.get("LOGLEVEL") or section.get("level")
    log_format = env.get("LOGAS") or section.get("format")
    debug_raw = env.get("DEBUGLEVEL")
    debug = _parse_debug_level(debug_raw) if debug_raw is not None else _parse_debug_level(section.get("debug", 0))
    return {"level": level, "format": log_format, "debug": debug}
