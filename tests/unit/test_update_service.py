"""
Unit tests for the product update stage.

Run: pytest tests/unit/test_update_service.py -v
"""

import pytest
import requests

from exceptions import MissingInputFileError
from integrations.bigcommerce import BigCommerceClient
from models.reconciliation import RECONCILIATION_COLUMNS, ReconciliationResult
from models.sync_log import SyncLogEntry, SyncStatus
from services.update_service import UpdateService, summarize
from tests.factories import custom_fields
from tests.fakes import FakeBigCommerceApi, FakeSession
from utils.tables import read_table, write_table


MARKER = "avalara_sync"


def flagged(product_id, sku=None, exists=False, missing=False) -> ReconciliationResult:
    return ReconciliationResult(
        product_id=str(product_id),
        sku=sku or f"SKU{product_id}",
        name=f"Product {product_id}",
        exists_in_registry=exists,
        is_missing_data=missing,
    )


def write_flagged(files, results):
    write_table(files.products_to_update, (r.to_row() for r in results), RECONCILIATION_COLUMNS)


def make_service(session, files, delays) -> UpdateService:
    client = BigCommerceClient("https://api.bigcommerce.com/stores/abc123", "token", session=session)
    return UpdateService(client, files, marker_name=MARKER, delay_seconds=0.1, sleep=delays.append)


class TestProcessProduct:
    """Tests for UpdateService.process_product()"""

    def test_adds_marker(self, files, delays):
        api = FakeBigCommerceApi()
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.SUCCESS
        assert entry.marker_added is True
        assert entry.error_message == ""
        assert api.custom_fields["1"] == [{"id": 1, "name": MARKER, "value": "1"}]

    def test_marker_present_is_skipped(self, files, delays):
        api = FakeBigCommerceApi()
        api.custom_fields["1"] = [{"id": 9, "name": MARKER, "value": "1"}]
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.SKIPPED
        assert entry.marker_added is False
        assert entry.error_message == "Custom field already exists"
        assert api.create_calls == []

    def test_field_limit_is_error_without_create_call(self, files, delays):
        """50 existing fields and no marker: error, no POST."""
        api = FakeBigCommerceApi()
        api.custom_fields["1"] = custom_fields(50)
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.ERROR
        assert entry.marker_added is False
        assert "50" in entry.error_message
        assert api.create_calls == []

    def test_49_fields_still_gets_marker(self, files, delays):
        api = FakeBigCommerceApi()
        api.custom_fields["1"] = custom_fields(49)
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.SUCCESS

    def test_not_found_fields_treated_as_empty(self, files, delays):
        """A 404 listing fields is not an error; the create call still happens."""
        api = FakeBigCommerceApi()
        api.missing_products.add("1")
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        # the create is also answered with 404 by the fake
        assert entry.status == SyncStatus.ERROR
        assert entry.error_message.startswith("404:")
        assert api.create_calls == ["1"]

    def test_create_failure_records_status_and_message(self, files, delays):
        api = FakeBigCommerceApi()
        api.failing_creates["1"] = (422, {"status": 422, "title": "Invalid custom field"})
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.ERROR
        assert entry.error_message == "422: Invalid custom field"
        assert entry.marker_added is False

    def test_transport_failure_records_raw_message(self, files, delays):
        session = FakeSession().queue(requests.exceptions.ReadTimeout("Read timed out"))
        service = make_service(session, files, delays)

        entry = service.process_product(flagged(1))

        assert entry.status == SyncStatus.ERROR
        assert entry.error_message == "Read timed out"

    def test_entry_copies_reconciliation_flags(self, files, delays):
        api = FakeBigCommerceApi()
        service = make_service(api.session(), files, delays)

        entry = service.process_product(flagged(1, exists=True, missing=True))

        assert entry.exists_in_registry is True
        assert entry.is_missing_data is True
        assert entry.to_row()["exists_in_avalara"] == "yes"


class TestProcess:
    """Tests for UpdateService.process() sequencing."""

    def test_errors_do_not_stop_the_loop(self, files, delays):
        api = FakeBigCommerceApi()
        api.failing_creates["2"] = (500, {"title": "Internal error"})
        service = make_service(api.session(), files, delays)

        entries = service.process([flagged(1), flagged(2), flagged(3)])

        assert [e.status for e in entries] == [SyncStatus.SUCCESS, SyncStatus.ERROR, SyncStatus.SUCCESS]

    def test_delay_between_every_product(self, files, delays):
        api = FakeBigCommerceApi()
        api.custom_fields["2"] = [{"name": MARKER, "value": "1"}]
        service = make_service(api.session(), files, delays)

        service.process([flagged(1), flagged(2), flagged(3)])

        assert delays == [0.1, 0.1]


class TestSummarize:
    """Tests for summarize()"""

    def test_counts_and_error_breakdown(self):
        def entry(status, message=""):
            return SyncLogEntry(
                product_id="1", sku="A", exists_in_registry=False, is_missing_data=False,
                status=status, error_message=message,
            )

        summary = summarize([
            entry(SyncStatus.SUCCESS),
            entry(SyncStatus.SKIPPED, "Custom field already exists"),
            entry(SyncStatus.ERROR, "422: Invalid"),
            entry(SyncStatus.ERROR, "422: Other"),
            entry(SyncStatus.ERROR, "Maximum custom fields limit reached (50)"),
            entry(SyncStatus.ERROR, ""),
        ])

        assert summary.success == 1
        assert summary.skipped == 1
        assert summary.errors == 4
        assert summary.total == 6
        assert summary.error_breakdown == {
            "422": 2,
            "Maximum custom fields limit reached (50)": 1,
            "Unknown": 1,
        }


class TestUpdateServiceRun:
    """Tests for UpdateService.run()"""

    def test_missing_input_fails_fast(self, files, delays):
        session = FakeSession()
        service = make_service(session, files, delays)

        with pytest.raises(MissingInputFileError) as exc_info:
            service.run()

        assert "products-to-update.csv" in exc_info.value.message
        assert session.calls == []

    def test_refilters_hand_edited_rows(self, files, delays):
        """Rows that no longer need an update are ignored."""
        write_flagged(files, [flagged(1)])
        rows = read_table(files.products_to_update)
        rows.append({**rows[0], "product_id": "2", "exists_in_avalara": "yes", "is_missing_data": "no"})
        write_table(files.products_to_update, rows, RECONCILIATION_COLUMNS)

        api = FakeBigCommerceApi()
        summary = make_service(api.session(), files, delays).run()

        assert summary.total == 1
        assert [r["product_id"] for r in read_table(files.sync_log)] == ["1"]

    def test_nothing_to_update_skips_api(self, files, delays):
        write_flagged(files, [])
        session = FakeSession()

        summary = make_service(session, files, delays).run()

        assert summary.total == 0
        assert summary.error_breakdown == {}
        assert session.calls == []
        assert read_table(files.sync_log) == []
        assert "Total Products Processed: 0" in files.update_summary.read_text()

    def test_empty_rerun_replaces_previous_log(self, files, delays):
        """A run with nothing flagged must not leave the last run's outcomes behind."""
        write_flagged(files, [flagged(1)])
        api = FakeBigCommerceApi()
        make_service(api.session(), files, delays).run()
        assert len(read_table(files.sync_log)) == 1

        write_flagged(files, [])
        summary = make_service(api.session(), files, delays).run()

        assert summary.total == 0
        assert read_table(files.sync_log) == []
        assert "Successfully updated: 0" in files.update_summary.read_text()

    def test_unexpected_failure_keeps_finished_outcomes(self, files, delays):
        """A malformed custom field listing stops the run, but earlier products stay logged."""
        write_flagged(files, [flagged(1), flagged(2), flagged(3)])
        api = FakeBigCommerceApi()
        api.custom_fields["2"] = ["not-a-field"]

        with pytest.raises(AttributeError):
            make_service(api.session(), files, delays).run()

        log = read_table(files.sync_log)
        assert [row["product_id"] for row in log] == ["1"]
        assert log[0]["status"] == "success"
        assert api.create_calls == ["1"]

    def test_writes_log_and_report(self, files, delays):
        write_flagged(files, [flagged(1), flagged(2, exists=True, missing=True)])
        api = FakeBigCommerceApi()
        api.custom_fields["2"] = custom_fields(50)

        summary = make_service(api.session(), files, delays).run()

        log = read_table(files.sync_log)
        assert [row["status"] for row in log] == ["success", "error"]
        assert log[0]["custom_field_added"] == "yes"
        assert log[1]["custom_field_added"] == "no"
        assert log[1]["error_message"] == "Maximum custom fields limit reached (50)"
        assert log[0]["timestamp"]
        assert summary.success == 1
        assert summary.errors == 1

        report = files.update_summary.read_text()
        assert "Successfully updated: 1" in report
        assert "Errors: 1" in report
        assert "Maximum custom fields limit reached (50): 1 products" in report

    def test_second_run_skips_everything_that_succeeded(self, files, delays):
        """Idempotence: the marker added in run one is found in run two."""
        write_flagged(files, [flagged(1), flagged(2), flagged(3)])
        api = FakeBigCommerceApi()

        first = make_service(api.session(), files, delays).run()
        second = make_service(api.session(), files, delays).run()

        assert first.success == 3
        assert second.skipped == 3
        assert second.success == 0
        assert len(api.create_calls) == 3
