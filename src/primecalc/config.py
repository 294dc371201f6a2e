from __future__ import annotations

from dataclasses import dataclass
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:
    import tomli as toml  # type: ignore

from primecalc.utility import UserInputError
from primecalc.workspace import workspace_dir


@dataclass
class Settings:
    """
    Wrap the full TOML dict (without the [_PROFILE_] section).
    .as_dict() feeds runtime.apply().

    Added fields:
      - name:        resolved profile name (file stem if not given in [_PROFILE_])
      - description: one-line description from [_PROFILE_] or "(no description)"
    """
    data: dict[str, Any]
    name: str
    description: str
    _source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


# --- Paths -----------------------------------------------------------------

def _profiles_dir() -> Path:
    return workspace_dir() / "profiles"


def _profile_path(name: str) -> Path:
    return _profiles_dir() / f"{name}.toml"


# --- I/O -------------------------------------------------------------------


def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None


# --- Metadata handling -----------------------------------------------------


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [_PROFILE_] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("_PROFILE_") or {}
    data = {k: v for k, v in raw.items() if k != "_PROFILE_"}

    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))

    return data, name, description


def _packaged_default() -> Settings:
    ref = pkg_files("primecalc") / "profiles" / "default.toml"
    with as_file(ref) as real:
        path = Path(real)
        data, name, description = _split_profile_data(_load_toml(path), path.stem)
    return Settings(data=data, name=name, description=description, _source=None)


# --- Public API ------------------------------------------------------------


def list_all_profiles() -> list[str]:
    """Return the available profile names (filename stems) in the workspace."""
    pdir = _profiles_dir()
    if not pdir.exists():
        return []
    return sorted(p.stem for p in pdir.glob("*.toml"))


def has_profile(name: str) -> bool:
    return _profile_path(name).exists()


def load_settings(name: str | None) -> Settings:
    """
    Load a profile by name (default 'default') and strip the [_PROFILE_] metadata.

    The workspace file wins; 'default' falls back to the packaged profile when
    the workspace has none. Unknown non-default names raise UserInputError.
    """
    if not name:
        name = "default"

    path = _profile_path(name)
    if not path.exists():
        if name == "default":
            return _packaged_default()
        available = ", ".join(list_all_profiles()) or "(none)"
        raise UserInputError(
            f"Unknown profile '{name}' (looked in {_profiles_dir()}). Available profiles: {available}"
        )

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)

    # Workspace profiles may omit sections; fill them from the packaged default
    merged = dict(_packaged_default().data)
    for section, values in data.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values

    return Settings(
        data=merged,
        name=resolved_name,
        description=description,
        _source=path,
    )
