"""
Human-readable summary reports for the reconcile and update stages.

Reports are for operators only; nothing reads them back.
"""

from models.reconciliation import ReconciliationSummary
from models.sync_log import UpdateSummary


def _breakdown_lines(counts: dict[str, int]) -> str:
    if not counts:
        return "  (none)"
    return "\n".join(f"  - {key}: {count} products" for key, count in counts.items())


def render_reconciliation_report(summary: ReconciliationSummary) -> str:
    """Render reconciliation-summary.txt."""
    return f"""
Reconciliation Summary
=====================

Date: {summary.generated_at.isoformat()}
Total BigCommerce Products: {summary.total_products}
Total Avalara Items: {summary.total_registry_items}

Results:
- Products missing from Avalara: {summary.missing_in_registry}
- Products with missing data: {summary.missing_data}
- Products complete in Avalara: {summary.complete}
- Total products to update: {summary.products_to_update}

Missing Data Breakdown:
{_breakdown_lines(summary.missing_field_breakdown)}

Next Steps:
1. Review products-to-update.csv for accuracy
2. Run the update stage to trigger sync for flagged products
3. Monitor webhook logs for sync completion
"""


def render_update_report(summary: UpdateSummary) -> str:
    """Render update-summary.txt."""
    return f"""
Product Update Summary
=====================

Date: {summary.generated_at.isoformat()}
Total Products Processed: {summary.total}

Results:
- Successfully updated: {summary.success}
- Errors: {summary.errors}
- Skipped: {summary.skipped}

Error Breakdown:
{_breakdown_lines(summary.error_breakdown)}

Next Steps:
1. Monitor BigCommerce webhook logs for product/updated events
2. Verify products appear in Avalara within 24-48 hours
3. Run reconciliation again to confirm sync completion
4. Consider removing custom fields after successful sync

Note: Custom fields trigger the store/product/updated webhook which sends
product data to Avalara for registration and classification.
"""
