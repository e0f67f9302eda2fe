"""Service module exports."""

from . import (
    amortization,
    export_csv,
    formatting,
    import_csv,
    interest,
    months,
    payments,
    payoff,
    scenario,
    scoring,
    strategies,
    timeline,
)

__all__ = [
    "amortization",
    "export_csv",
    "formatting",
    "import_csv",
    "interest",
    "months",
    "payments",
    "payoff",
    "scenario",
    "scoring",
    "strategies",
    "timeline",
]
