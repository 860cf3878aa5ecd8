# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the favorites and forecast logic:
# - models/: Pydantic schemas (places, sync snapshots, location, weather)
# - services/: Synchronizer, write queue, selection, forecast orchestration
#
# Code in this package talks to storage only through the interfaces in
# services/contracts.py, so tests can substitute in-memory fakes.
# =============================================================================
