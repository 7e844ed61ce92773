from typing import Any, Dict, List, Optional
from flask import current_app


def available_themes() -> Dict[str, Dict[str, Any]]:
    return current_app.config.get("THEMES", {})


def region_exists(theme: str, region: str) -> bool:
    return region in available_themes().get(theme, {}).get("regions", {})


def theme_regions(block=None) -> List[Dict[str, Any]]:
    """
    Themes with their regions, as needed by the "Theme Region" part of the
    block form.

    When a block is given, `value` holds the region it currently occupies in
    each theme ("" when unassigned there).
    """
    selected: Dict[str, str] = {}
    if block is not None:
        for assignment in block.regions:
            selected.setdefault(assignment.theme, assignment.region)

    return [
        {
            "theme_machine_name": name,
            "theme_human_name": theme.get("human_name", name),
            "description": theme.get("description", ""),
            "regions": dict(theme.get("regions", {})),
            "value": selected.get(name, ""),
        }
        for name, theme in available_themes().items()
    ]


def languages_list() -> Dict[str, str]:
    return dict(current_app.config.get("LANGUAGES", {}))


def front_theme() -> Optional[str]:
    return current_app.config.get("FRONT_THEME")


def back_theme() -> Optional[str]:
    return current_app.config.get("BACK_THEME")
