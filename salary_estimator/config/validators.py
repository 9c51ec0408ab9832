"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    search = config_dict.get("search") or {}
    advanced = config_dict.get("advanced") or {}
    modeling = config_dict.get("modeling") or {}

    if isinstance(search, dict):
        codes = search.get("location_codes")
        if isinstance(codes, list):
            normalized = [str(code).strip() for code in codes]
            duplicates = sorted({code for code in normalized if normalized.count(code) > 1})
            if duplicates:
                warning_messages.append(
                    f"Duplicate location codes will be scraped more than once: {', '.join(duplicates)}"
                )

        pages = search.get("pages_per_location", 1)
        if isinstance(pages, int) and pages > 10:
            warning_messages.append(
                f"Large pages_per_location ({pages}) may trigger rate limiting"
            )

        if isinstance(advanced, dict):
            delay = advanced.get("request_delay_seconds", 1.0)
            if isinstance(delay, (int, float)) and delay == 0 and (
                not isinstance(codes, list) or len(codes) > 5
            ):
                warning_messages.append(
                    "request_delay_seconds is 0 while scraping many locations; requests may be blocked"
                )

    if isinstance(modeling, dict):
        grids = modeling.get("tuning_grids") or {}
        if isinstance(grids, dict):
            for name, grid in grids.items():
                if not isinstance(grid, dict):
                    continue
                combinations = 1
                for values in grid.values():
                    if isinstance(values, list):
                        combinations *= max(len(values), 1)
                if combinations > 200:
                    warning_messages.append(
                        f"Tuning grid '{name}' has {combinations} combinations, which may be slow"
                    )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
