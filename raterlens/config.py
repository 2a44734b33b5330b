"""Configuration for evaluation feedback analysis."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Corpus and schema locations
DATA_FILE = Path(os.environ.get("RATERLENS_DATA_FILE", "data/evaluations.json"))
SCHEMA_FILE = os.environ.get("RATERLENS_SCHEMA")

# Logging
LOG_LEVEL = os.environ.get("RATERLENS_LOG_LEVEL", "INFO").upper()
LOG_FILE = os.environ.get("RATERLENS_LOG_FILE")

# Analysis settings
EXPERT_TIERS = ("expert", "advanced")  # Tiers counted as expert opinion
MIN_EXPERT_COMMENTS = 3  # Below this, expert consensus is not computed
MIN_RATERS = 2  # Raters needed for any agreement metric
DEDUP_PREFIX_CHARS = 50  # Text prefix used to dedupe comments within an evaluation
