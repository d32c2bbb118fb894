"""Pytest configuration shared by unit and integration tests"""

import sys
from pathlib import Path

# Add project root to path for policy_rag imports without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))
