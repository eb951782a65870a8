"""
Request Validation for the Facility Billing Engine

Validates the request parameters before any configuration is loaded.
Raises ValueError with clear messages for any constraint violations.
Configuration records themselves are assumed to be pre-validated.
"""


class RequestValidator:
    """Validates billing preview request parameters."""

    def validate(self, client_id: str, company_id: str, year: int, month: int) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        self._validate_scope(client_id, company_id)
        self._validate_period(year, month)

    def _validate_scope(self, client_id: str, company_id: str) -> None:
        if not client_id:
            raise ValueError("client_id is required")
        if not company_id:
            raise ValueError("company_id is required")

    def _validate_period(self, year: int, month: int) -> None:
        if isinstance(year, bool) or not isinstance(year, int) or not (1000 <= year <= 9999):
            raise ValueError(f"year must be a 4-digit integer, got: {year}")

        if isinstance(month, bool) or not isinstance(month, int) or not (1 <= month <= 12):
            raise ValueError(f"Month must be between 1 and 12, got: {month}")
