"""
Tax Calculator

Applies a facility's tax behavior against the client tax rate.
"""

from decimal import Decimal

from ..models import Client, TaxBehavior
from .proration import quantize_money


class TaxCalculator:
    """Calculates the additive tax for one line item."""

    # Behaviors that add client tax on top of the rate
    TAXABLE_BEHAVIORS = frozenset({TaxBehavior.INHERIT_CLIENT, TaxBehavior.PRE_TAX})

    def calculate(
        self,
        line_item_total: Decimal,
        tax_behavior: TaxBehavior,
        client: Client,
        included_in_total: bool,
    ) -> Decimal:
        """
        TAX_INCLUDED rates already contain tax, so no tax line is produced.
        """
        if not included_in_total or client.tax_exempt:
            return Decimal('0')

        if tax_behavior in self.TAXABLE_BEHAVIORS:
            return quantize_money(line_item_total * client.tax_rate)

        return Decimal('0')
