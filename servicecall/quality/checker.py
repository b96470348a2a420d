"""
Response Quality Assurance

Post-execution validation of a completed transaction against a pluggable
rule set.

Severity policy:
- info / warn: logged only
- error: a ComplianceError is attached to the response
- fatal: the error is attached and ComplianceException is raised
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from servicecall.schemas.errors import ErrorKinds, HttpClientError

from .rules import CheckResult, ComplianceRule, default_rules

if TYPE_CHECKING:
    from servicecall.http.transaction import Transaction


logger = logging.getLogger(__name__)


class ResponseQualityAssurance:
    """
    Runs compliance rules once per executed transaction.

    An error already present on the response (e.g. a TransportError) is
    never replaced; violations are logged in that case.
    """

    def __init__(self, rules: Optional[Iterable[ComplianceRule]] = None) -> None:
        self.rules: list[ComplianceRule] = list(rules) if rules is not None else default_rules()

    def add_rule(self, rule: ComplianceRule) -> "ResponseQualityAssurance":
        self.rules.append(rule)
        return self

    def evaluate(self, transaction: "Transaction") -> list[CheckResult]:
        """Run every rule and return all results without side effects."""
        return [rule.check(transaction) for rule in self.rules]

    def check_compliance(self, transaction: "Transaction") -> list[CheckResult]:
        """
        Check a completed transaction and attach violations to its response.

        Returns:
            All check results

        Raises:
            ComplianceException: If a fatal rule failed
        """
        response = transaction.response
        if response.error is not None and response.error.kind == ErrorKinds.TRANSPORT_ERROR:
            logger.debug(f"Skipping compliance checks for failed transport call {response.method} {response.url}")
            return []

        results = self.evaluate(transaction)
        failures = [r for r in results if not r.ok]
        for result in failures:
            log = logger.warning if result.attaches_error else logger.info
            log(
                f"[{transaction.service_name or '-'}] {response.method} {response.url} "
                f"compliance '{result.check_id}' ({result.severity}): {result.message}"
            )

        violations = [r for r in failures if r.attaches_error]
        if not violations:
            return results

        fatal = any(r.is_fatal for r in violations)
        first = next((r for r in violations if r.is_fatal), violations[0])
        error = HttpClientError(
            kind=ErrorKinds.COMPLIANCE_ERROR,
            message=first.message,
            severity="fatal" if fatal else first.severity,
            details={
                "check_id": first.check_id,
                "service_name": transaction.service_name,
                "violations": [r.model_dump(mode="json") for r in violations],
            },
        )
        if response.error is None:
            response.set_error(error)
        else:
            logger.warning(
                f"Response already carries {response.error.kind}; compliance error not attached"
            )

        if fatal:
            raise error.to_exception()
        return results
