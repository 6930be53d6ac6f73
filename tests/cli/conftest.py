from __future__ import annotations

from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def _quiet_logging():
    """Keep CLI invocations from replacing the root handlers pytest installs."""
    with patch("medusa_mcp.cli_commands._output.configure_logging") as configure:
        yield configure
