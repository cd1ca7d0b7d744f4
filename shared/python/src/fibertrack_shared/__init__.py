"""
fibertrack_shared — shared configuration, models, and constants for fibertrack.

Usage:
    from fibertrack_shared.config import settings
    from fibertrack_shared.db import get_supabase_client
    from fibertrack_shared.models import Asset, Location, Wave
    from fibertrack_shared.constants import VALID_REGIONS, CSV_BATCH_SIZE
"""

__version__ = "0.1.0"
