"""Load [tool.checked-exceptions] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

CONFIG_SECTION = "checked-exceptions"


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml, walking up from the working directory."""

    @staticmethod
    def load_config_from_fs(start: Path | None = None) -> dict[str, object]:
        """Load [tool.checked-exceptions] from the nearest pyproject.toml; {} when absent or unreadable."""
        current_path = (start or Path.cwd()).resolve()
        while True:
            config_file = current_path / "pyproject.toml"
            if config_file.exists():
                try:
                    with config_file.open("rb") as f:
                        data = toml_lib.load(f)
                except (OSError, toml_lib.TOMLDecodeError) as exc:
                    logging.warning("Configuration Warning: cannot read %s: %s", config_file, exc)
                    return {}
                tool_section = data.get("tool", {}) or {}
                return dict(tool_section.get(CONFIG_SECTION, {}) or {})
            if current_path.parent == current_path:
                return {}
            current_path = current_path.parent
