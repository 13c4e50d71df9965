"""Load the launcher configuration from TOML.

Example:
>>> config = load_config('entries = ["htop"]')
>>> config.entries
(NameEntry(name='htop'),)

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import shlex
import tomllib
import typing as typ
from pathlib import Path

from tagmenu.display import DisplayConfig
from tagmenu.entry import (
    BareRun,
    FilterEntry,
    FullEntry,
    NameEntry,
    ShellRun,
)
from tagmenu.errors import ConfigError
from tagmenu.executor import ShellPolicy
from tagmenu.picker import DmenuOptions, PickerCommand
from tagmenu.scan import PathConfig
from tagmenu.selection import SelectionPolicy

if typ.TYPE_CHECKING:
    from tagmenu.entry import ConfiguredEntry, Run

type _Table = dict[str, typ.Any]

_TOML_TYPE_NAMES: tuple[tuple[type, str], ...] = (
    (bool, "boolean"),
    (int, "integer"),
    (float, "float"),
    (str, "string"),
    (list, "array"),
    (dict, "table"),
    (dt.datetime, "datetime"),
    (dt.date, "date"),
    (dt.time, "time"),
)

# TOML key -> DmenuOptions field
_DMENU_KEYS: dict[str, tuple[str, type]] = {
    "bottom": ("bottom", bool),
    "fast": ("fast", bool),
    "case-sensitive": ("case_sensitive", bool),
    "lines": ("lines", int),
    "monitor": ("monitor", int),
    "prompt": ("prompt", str),
    "font": ("font", str),
    "background": ("background", str),
    "foreground": ("foreground", str),
    "selected-background": ("selected_background", str),
    "selected-foreground": ("selected_foreground", str),
    "window-id": ("window_id", str),
}


@dc.dataclass(frozen=True, slots=True)
class LauncherConfig:
    """Typed launcher configuration.

    Attributes
    ----------
    entries:
        Configured entries, ``[menu]`` table first, then ``entries`` array.
    path:
        Executable discovery settings, or ``None`` when scanning is off.
    shell:
        Shell policy for shell-text commands.
    display:
        Menu layout.
    selection:
        Ad-hoc selection handling.
    picker:
        Picker program and flags.

    """

    entries: tuple[ConfiguredEntry, ...] = ()
    path: PathConfig | None = None
    shell: ShellPolicy = dc.field(default_factory=ShellPolicy)
    display: DisplayConfig = dc.field(default_factory=DisplayConfig)
    selection: SelectionPolicy = dc.field(default_factory=SelectionPolicy)
    picker: PickerCommand = dc.field(default_factory=PickerCommand)


def _type_name(value: object) -> str:
    for kind, name in _TOML_TYPE_NAMES:
        if isinstance(value, kind):
            return name
    return type(value).__name__


def _not_valid(target: str, valid: str, found: object) -> ConfigError:
    return ConfigError(
        f"only toml {valid} is a valid type for `{target}`; "
        f"found `{_type_name(found)}`",
    )


def _get[T](table: _Table, key: str, kind: type[T], target: str, default: T) -> T:
    """Return ``table[key]`` checked against ``kind``."""
    if key not in table:
        return default
    value = table[key]
    # bool is an int subclass; TOML keeps them apart.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise _not_valid(target, f"`{_type_name(kind())}`", value)
    return value


def _string_list(value: object, target: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _not_valid(target, "`array` of `string`", value)
    return tuple(value)


def _argv(value: object, target: str) -> tuple[str, ...]:
    """Parse a command given as a string (shell-split) or string array."""
    if isinstance(value, str):
        try:
            argv = tuple(shlex.split(value))
        except ValueError as exc:
            msg = f"can't split `{target}` into arguments"
            raise ConfigError(msg) from exc
    else:
        argv = _string_list(value, target)
    if not argv:
        msg = f"`{target}` cannot be empty"
        raise ConfigError(msg)
    return argv


def _parse_run(value: object, target: str, *, shell_enabled: bool) -> Run:
    if isinstance(value, str) and shell_enabled:
        return ShellRun(value)
    if isinstance(value, str | list):
        return BareRun(_argv(value, target))
    raise _not_valid(target, "`string` or `array`", value)


def _entry_from_table(
    table: _Table,
    name: str | None,
    target: str,
    *,
    shell_enabled: bool,
) -> FullEntry:
    if "run" not in table:
        msg = f"{target} has no `run` value"
        raise ConfigError(msg)
    raw_run = table["run"]
    run = _parse_run(raw_run, f"{target}.run", shell_enabled=shell_enabled)
    group = _get(table, "group", int, f"{target}.group", 0)
    if name is None:
        name = _get(table, "name", str, f"{target}.name", "")
    if not name:
        name = raw_run if isinstance(raw_run, str) else shlex.join(raw_run)
    return FullEntry(name=name, run=run, group=group)


def _menu_entry(name: str, value: object, *, shell_enabled: bool) -> ConfiguredEntry:
    target = f"menu.{name}"
    match value:
        case False:
            return FilterEntry(name)
        case True:
            return NameEntry(name)
        case str() | list():
            return FullEntry(
                name=name,
                run=_parse_run(value, target, shell_enabled=shell_enabled),
            )
        case dict():
            return _entry_from_table(value, name, target, shell_enabled=shell_enabled)
    raise _not_valid(target, "`boolean`, `string`, `array` or `table`", value)


def _array_entry(value: object, *, shell_enabled: bool) -> ConfiguredEntry:
    match value:
        case str():
            return NameEntry(value)
        case dict():
            return _entry_from_table(value, None, "entry", shell_enabled=shell_enabled)
    raise _not_valid("entries", "`string` or `table`", value)


def _parse_entries(
    document: _Table,
    *,
    shell_enabled: bool,
) -> tuple[ConfiguredEntry, ...]:
    menu = _get(document, "menu", dict, "menu", {})
    array = _get(document, "entries", list, "entries", [])
    entries = [
        _menu_entry(name, value, shell_enabled=shell_enabled)
        for name, value in menu.items()
    ]
    entries.extend(_array_entry(value, shell_enabled=shell_enabled) for value in array)
    return tuple(entries)


def _parse_shell(section: _Table) -> ShellPolicy:
    piped = _get(section, "shell-piped", bool, "config.shell-piped", False)
    value = section.get("shell", True)
    if value is False:
        return ShellPolicy.disabled()
    if value is True:
        return ShellPolicy.default(piped=piped)
    if isinstance(value, str | list):
        return ShellPolicy(argv=_argv(value, "config.shell"), piped=piped)
    raise _not_valid("config.shell", "`boolean`, `string` or `array`", value)


def _parse_display(section: _Table) -> DisplayConfig:
    numbered = _get(section, "numbered", bool, "config.numbered", False)
    separator = section.get("separator", True)
    if not isinstance(separator, bool | str):
        raise _not_valid("config.separator", "`boolean` or `string`", separator)
    return DisplayConfig(numbered=numbered, separator=separator)


def _parse_selection(section: _Table) -> SelectionPolicy:
    return SelectionPolicy(
        ad_hoc=_get(section, "ad-hoc", bool, "config.ad-hoc", False),
        strict=_get(section, "strict", bool, "config.strict", True),
    )


def _parse_dmenu(table: _Table) -> DmenuOptions:
    values: dict[str, object] = {}
    for key, (field, kind) in _DMENU_KEYS.items():
        if key in table:
            values[field] = _get(table, key, kind, f"config.dmenu.{key}", None)
    return DmenuOptions(**values)


def _parse_picker(section: _Table) -> PickerCommand:
    argv = _argv(section["picker"], "config.picker") if "picker" in section else None
    dmenu = _get(section, "dmenu", dict, "config.dmenu", None)
    is_dmenu = argv is None or Path(argv[0]).name == "dmenu"
    options = _parse_dmenu(dmenu or {}) if dmenu is not None or is_dmenu else None
    if argv is None:
        return PickerCommand(options=options)
    return PickerCommand(argv=argv, options=options)


def _parse_path(document: _Table) -> PathConfig | None:
    table = _get(document, "path", dict, "path", None)
    if table is None:
        return None
    return PathConfig(
        dirs=_string_list(table.get("dirs", []), "path.dirs"),
        env=_get(table, "env", bool, "path.env", True),
        recursive=_get(table, "recursive", bool, "path.recursive", False),
        follow_symlinks=_get(
            table,
            "follow-symlinks",
            bool,
            "path.follow-symlinks",
            True,
        ),
        replace=_get(table, "replace", bool, "path.replace", False),
        group=_get(table, "group", int, "path.group", 0),
        enabled=_get(table, "enable", bool, "path.enable", True),
    )


def load_config(text: str) -> LauncherConfig:
    """Parse TOML ``text`` into a ``LauncherConfig``.

    Raises
    ------
    ConfigError
        If the text is empty, is not valid TOML, or holds values of the
        wrong type.

    """
    if not text.strip():
        msg = "provided toml config is empty"
        raise ConfigError(msg)
    try:
        document = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        msg = "can't parse provided toml config"
        raise ConfigError(msg) from exc

    section = _get(document, "config", dict, "config", {})
    shell = _parse_shell(section)
    entries = _parse_entries(document, shell_enabled=shell.enabled)
    path = _parse_path(document)
    if not entries and (path is None or not path.enabled):
        msg = (
            "no menu entries defined; give at least one of `menu` or `entries` "
            "a value, or enable `path` scanning"
        )
        raise ConfigError(msg)

    return LauncherConfig(
        entries=entries,
        path=path,
        shell=shell,
        display=_parse_display(section),
        selection=_parse_selection(section),
        picker=_parse_picker(section),
    )


def read_config(path: str | Path) -> LauncherConfig:
    """Read and parse the TOML file at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"can't read config file `{path}`"
        raise ConfigError(msg) from exc
    return load_config(text)


__all__ = ["LauncherConfig", "load_config", "read_config"]
