"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the list, preview chrome, status line, and help
modal. Markdown highlighting inside the preview is handled by Pygments and is
independent of the selected theme.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..runtime.config import COLOR_KEYS


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    divider: str
    reverse: str
    reset: str
    accent: str
    selection: str
    header: str
    dim: str
    folder: str
    document: str
    tag: str
    size: str
    search_query: str
    error: str
    help_heading: str
    help_key: str
    help_border: str


DEFAULT_THEME = UITheme(
    name="default",
    divider="\033[2m",
    reverse="\033[7m",
    reset="\033[0m",
    accent="\033[38;5;44m",
    selection="\033[7m",
    header="\033[1;38;5;81m",
    dim="\033[2;38;5;250m",
    folder="\033[1;34m",
    document="\033[38;5;252m",
    tag="\033[38;5;214m",
    size="\033[38;5;109m",
    search_query="\033[1;38;5;81m",
    error="\033[38;5;203m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
    help_border="\033[38;5;45m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    divider="\033[2;38;5;31m",
    reverse="\033[7m",
    reset="\033[0m",
    accent="\033[38;5;39m",
    selection="\033[7;38;5;45m",
    header="\033[1;38;5;45m",
    dim="\033[2;38;5;110m",
    folder="\033[1;38;5;45m",
    document="\033[38;5;153m",
    tag="\033[38;5;215m",
    size="\033[38;5;73m",
    search_query="\033[1;38;5;45m",
    error="\033[38;5;209m",
    help_heading="\033[1;38;5;45m",
    help_key="\033[38;5;153m",
    help_border="\033[38;5;39m",
)

PLAIN_THEME = UITheme(
    name="plain",
    divider="",
    reverse="",
    reset="",
    accent="",
    selection="",
    header="",
    dim="",
    folder="",
    document="",
    tag="",
    size="",
    search_query="",
    error="",
    help_heading="",
    help_key="",
    help_border="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def next_theme_name(name: str | None) -> str:
    names = available_theme_names()
    current = normalize_theme_name(name)
    return names[(names.index(current) + 1) % len(names)]


def hex_to_sgr(value: str) -> str:
    """Convert ``#rrggbb`` into a 24-bit foreground SGR sequence."""
    text = value.lstrip("#")
    red, green, blue = (int(text[idx : idx + 2], 16) for idx in (0, 2, 4))
    return f"\033[38;2;{red};{green};{blue}m"


def _selection_sgr(value: str) -> str:
    text = value.lstrip("#")
    red, green, blue = (int(text[idx : idx + 2], 16) for idx in (0, 2, 4))
    return f"\033[48;2;{red};{green};{blue}m"


def apply_color_overrides(theme: UITheme, colors: dict[str, str] | None) -> UITheme:
    """Replace palette slots with configured ``#rrggbb`` colors."""
    if not colors:
        return theme
    changes: dict[str, str] = {}
    for key in COLOR_KEYS:
        value = colors.get(key)
        if not value:
            continue
        # Selection keeps reverse-video semantics through a background color.
        changes[key] = _selection_sgr(value) if key == "selection" else hex_to_sgr(value)
    return replace(theme, **changes) if changes else theme


def resolve_theme(
    name: str | None,
    *,
    no_color: bool = False,
    colors: dict[str, str] | None = None,
) -> UITheme:
    """Return concrete theme for requested name, color mode, and overrides."""
    if no_color:
        return PLAIN_THEME
    theme = _THEMES.get(normalize_theme_name(name), DEFAULT_THEME)
    return apply_color_overrides(theme, colors)


__all__ = [
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "UITheme",
    "apply_color_overrides",
    "available_theme_names",
    "hex_to_sgr",
    "next_theme_name",
    "normalize_theme_name",
    "resolve_theme",
]
