"""
Quality Assurance

Compliance rules and the checker that applies them to transactions.
"""

from .checker import ResponseQualityAssurance
from .rules import (
    CheckResult,
    ComplianceRule,
    DecodableBodyRule,
    MaxDurationRule,
    RequiredHeadersRule,
    StatusBelowRule,
    default_rules,
)

__all__ = [
    "CheckResult",
    "ComplianceRule",
    "DecodableBodyRule",
    "MaxDurationRule",
    "RequiredHeadersRule",
    "ResponseQualityAssurance",
    "StatusBelowRule",
    "default_rules",
]
