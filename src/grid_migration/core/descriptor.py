"""
Launch descriptors: the intent-URI strings stored on app and shortcut records.

A descriptor looks like::

    #Intent;action=android.intent.action.MAIN;category=android.intent.category.LAUNCHER;
    launchFlags=0x10200000;component=com.android.calculator2/.Calculator;end

optionally prefixed with a data URI. Parsing is strict about the fragment
grammar; anything the grammar rejects raises ``DescriptorSyntaxError``.

Only two things matter to migration: which package / component the descriptor
launches (for validity checks and identity), and a *cleaned* canonical form
with the volatile ``sourceBounds`` field removed (for identity).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from urllib.parse import quote, unquote


INTENT_FRAGMENT = "#Intent;"
FRAGMENT_END = "end"

# Punctuation left unescaped when encoding values.
_SAFE = "-_.!~*'()"
_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*:")

_PLAIN_KEYS = ("action", "category", "type", "identifier", "launchFlags",
               "package", "component", "sourceBounds", "scheme")


class DescriptorSyntaxError(ValueError):
    """The descriptor text does not follow the intent-URI grammar."""


def _parse_int(value: str) -> int:
    """Integer with an optional sign and 0x / # (hex) or leading 0 (octal) prefix."""
    sign = 1
    text = value
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if not text:
        raise ValueError(f"empty integer {value!r}")
    if text[:2].lower() == "0x":
        return sign * int(text[2:], 16)
    if text[:1] == "#":
        return sign * int(text[1:], 16)
    if len(text) > 1 and text[0] == "0":
        return sign * int(text[1:], 8)
    return sign * int(text, 10)


def _parse_char(value: str) -> str:
    if not value:
        raise ValueError("empty char extra")
    return value[0]


# Typed extras: prefix -> converter used only to validate the raw value.
_EXTRA_TYPES = {
    "S.": str,
    "B.": lambda v: v.lower() == "true",
    "b.": _parse_int,
    "c.": _parse_char,
    "d.": float,
    "f.": float,
    "i.": _parse_int,
    "l.": _parse_int,
    "s.": _parse_int,
}


@dataclass(frozen=True)
class ComponentName:
    """Package plus fully-qualified class of a launchable component."""

    package: str
    class_name: str

    @classmethod
    def unflatten(cls, text: str) -> ComponentName | None:
        """Parse ``pkg/cls``; a class starting with ``.`` is relative to pkg."""
        sep = text.find("/")
        if sep <= 0 or sep == len(text) - 1:
            return None
        package = text[:sep]
        class_name = text[sep + 1:]
        if class_name.startswith("."):
            class_name = package + class_name
        return cls(package, class_name)

    def flatten(self) -> str:
        return f"{self.package}/{self.class_name}"

    def flatten_short(self) -> str:
        """Like ``flatten`` but with the class shortened relative to the package."""
        prefix = self.package + "."
        if self.class_name.startswith(prefix):
            return f"{self.package}/{self.class_name[len(self.package):]}"
        return self.flatten()


@dataclass(frozen=True)
class LaunchDescriptor:
    """Parsed form of a descriptor string."""

    data: str | None = None
    scheme: str | None = None
    action: str | None = None
    categories: tuple[str, ...] = ()
    type: str | None = None
    identifier: str | None = None
    launch_flags: int = 0
    package: str | None = None
    component: ComponentName | None = None
    source_bounds: str | None = None
    # (prefix, key, raw value) in their original order
    extras: tuple[tuple[str, str, str], ...] = field(default=())

    # ── Parsing ──────────────────────────────────────────────────────────

    @classmethod
    def parse(cls, text: str | None) -> LaunchDescriptor:
        """
        Parse a descriptor string.

        Raises:
            DescriptorSyntaxError: On any grammar violation.
        """
        if not text:
            raise DescriptorSyntaxError("empty descriptor")

        start = text.rfind("#")
        if start < 0 or not text.startswith(INTENT_FRAGMENT, start):
            if not _SCHEME_RE.match(text):
                raise DescriptorSyntaxError(f"no scheme in data URI: {text!r}")
            return cls(data=text)

        values: dict = {"categories": [], "extras": []}
        data = text[:start] or None
        segments = text[start + len(INTENT_FRAGMENT):].split(";")
        for pos, segment in enumerate(segments):
            if segment == FRAGMENT_END:
                break
            eq = segment.find("=")
            if eq < 0:
                raise DescriptorSyntaxError(
                    f"missing '=' in segment {pos} of {text!r}")
            key = segment[:eq]
            value = unquote(segment[eq + 1:])
            cls._apply(values, key, value, text)
        else:
            raise DescriptorSyntaxError(f"descriptor end not found: {text!r}")

        values["categories"] = tuple(values["categories"])
        values["extras"] = tuple(values["extras"])
        return cls(data=data, **values)

    @staticmethod
    def _apply(values: dict, key: str, value: str, text: str) -> None:
        if key == "category":
            values["categories"].append(value)
        elif key == "launchFlags":
            try:
                values["launch_flags"] = _parse_int(value)
            except ValueError as e:
                raise DescriptorSyntaxError(f"bad launchFlags {value!r}") from e
        elif key == "component":
            component = ComponentName.unflatten(value)
            if component is None:
                raise DescriptorSyntaxError(f"bad component {value!r}")
            values["component"] = component
        elif key == "sourceBounds":
            values["source_bounds"] = value
        elif key in _PLAIN_KEYS:
            values[key] = value
        elif key[:2] in _EXTRA_TYPES and len(key) > 2:
            prefix = key[:2]
            try:
                _EXTRA_TYPES[prefix](value)
            except ValueError as e:
                raise DescriptorSyntaxError(
                    f"bad {prefix} extra {key[2:]!r}={value!r}") from e
            values["extras"].append((prefix, unquote(key[2:]), value))
        else:
            raise DescriptorSyntaxError(f"unknown key {key!r} in {text!r}")

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def target_package(self) -> str | None:
        """Package that has to be installed for this descriptor to launch."""
        if self.component is not None:
            return self.component.package
        return self.package

    def without_source_bounds(self) -> LaunchDescriptor:
        return replace(self, source_bounds=None)

    # ── Serialisation ────────────────────────────────────────────────────

    def to_uri(self) -> str:
        """Canonical string form (fixed field order)."""
        if self.data is not None and not self._has_fragment_fields():
            return self.data

        parts = [self.data or "", INTENT_FRAGMENT]
        if self.scheme is not None:
            parts.append(f"scheme={quote(self.scheme, safe=_SAFE)};")
        if self.action is not None:
            parts.append(f"action={quote(self.action, safe=_SAFE)};")
        for category in self.categories:
            parts.append(f"category={quote(category, safe=_SAFE)};")
        if self.type is not None:
            parts.append(f"type={quote(self.type, safe=_SAFE + '/')};")
        if self.identifier is not None:
            parts.append(f"identifier={quote(self.identifier, safe=_SAFE)};")
        if self.launch_flags:
            parts.append(f"launchFlags=0x{self.launch_flags & 0xFFFFFFFF:x};")
        if self.package is not None:
            parts.append(f"package={quote(self.package, safe=_SAFE)};")
        if self.component is not None:
            parts.append(
                f"component={quote(self.component.flatten_short(), safe=_SAFE + '/')};")
        if self.source_bounds is not None:
            parts.append(f"sourceBounds={quote(self.source_bounds, safe=_SAFE)};")
        for prefix, key, value in self.extras:
            parts.append(
                f"{prefix}{quote(key, safe=_SAFE)}={quote(value, safe=_SAFE)};")
        parts.append(FRAGMENT_END)
        return "".join(parts)

    def _has_fragment_fields(self) -> bool:
        return any((
            self.scheme, self.action, self.categories, self.type,
            self.identifier, self.launch_flags, self.package, self.component,
            self.source_bounds, self.extras,
        ))


def clean_descriptor(text: str) -> str:
    """
    Canonical form of *text* with ``sourceBounds`` removed.

    Source bounds record where the icon was last tapped and change freely, so
    they must not make two otherwise equal descriptors differ. Text that does
    not parse is returned unchanged.
    """
    try:
        return LaunchDescriptor.parse(text).without_source_bounds().to_uri()
    except DescriptorSyntaxError:
        return text
