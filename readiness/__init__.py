# =============================================================================
# BOM READINESS ENGINE - PACKAGE
# =============================================================================
# This package contains the production readiness and cost engines for a BOM.
#
# Modules:
# - normalize: Numeric and flag coercion with safe fallbacks
# - parts: Part/batch summary records and loading
# - shortage: Shortage detection
# - bottleneck: Per-part limits and bottleneck marking
# - stock_health: Usable vs inactive stock split
# - currency: Base currency conversion
# - cost: Estimated cost summary and material cost comparison
# - report: Production readiness report builder
# - events: Observability events
# - settings: Engine settings (YAML)
# - validation_report: Consistency checks on engine outputs
# =============================================================================

__version__ = "0.1.0"
