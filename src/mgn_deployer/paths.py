"""Default path constants for mgn-deployer.

Layout mirrors the Hardhat project the contracts are compiled in:
- config/default_config.json     # networks and deployment settings
- config/values.json             # protocol constants keyed by chain id
- artifacts/                     # Hardhat compilation output
- script/constants/output/       # checkpoint files (deployment output)
"""

from pathlib import Path

CONFIG_DIR = Path("config")
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default_config.json"
DEFAULT_CONSTANTS_PATH = CONFIG_DIR / "values.json"
ARTIFACTS_DIR = Path("artifacts")
OUTPUT_DIR = Path("script/constants/output")
