"""API integration tests for the settlement decoding endpoints."""

from __future__ import annotations

import pytest

from tests.line_builders import (
    anticipation_line,
    financial_adjustment_line,
    header_line,
    sales_summary_line,
    settlement_file,
    trailer_line,
)

EST_A = "000000000000111"
EST_B = "000000000000222"


@pytest.fixture
def two_establishment_file() -> bytes:
    return settlement_file(
        header_line(movement_date="20022026", establishment=EST_A),
        sales_summary_line(
            establishment=EST_A, channel="POS", batch_id="P1",
            gross=10500, net=10000, fee=500,
        ),
        sales_summary_line(
            establishment=EST_A, channel="MAN", batch_id="M1",
            gross=10000, net=10000, fee=0,
        ),
        financial_adjustment_line(establishment=EST_A, sign="-", value=2500),
        sales_summary_line(
            establishment=EST_B, channel="MAN", batch_id="M2",
            gross=5000, net=5000, fee=0,
        ),
        anticipation_line(establishment=EST_B),
        "7THIS LINE HAS AN UNKNOWN TYPE",
        trailer_line(total_records=8),
    )


def _upload(client, content: bytes, **params):
    return client.post(
        "/api/v1/settlement/parse",
        params=params,
        files={"file": ("getnetextr_20260220.txt", content, "text/plain")},
    )


# ------------------------------------------------------------------
# POST /parse
# ------------------------------------------------------------------


def test_parse_file_groups_by_establishment(client, two_establishment_file):
    """POST /api/v1/settlement/parse returns one bundle per establishment."""
    response = _upload(client, two_establishment_file)

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["filename"] == "getnetextr_20260220.txt"
    assert data["movement_date"] == "2026-02-20"
    assert data["total_lines"] == 8
    assert data["records_decoded"] == 7
    assert data["skipped_lines"] == 1
    assert data["diagnostics"][0]["line_number"] == 7
    assert data["diagnostics"][0]["severity"] == "warning"
    assert data["run_id"] is not None

    codes = [e["bundle"]["establishment_code"] for e in data["establishments"]]
    assert codes == [EST_A, EST_B]
    for establishment in data["establishments"]:
        assert establishment["bundle"]["header"]["movement_date"] == "2026-02-20"
        assert establishment["bundle"]["trailer"]["total_records"] == 8


def test_parse_file_reconciles_man_gross(client, two_establishment_file):
    """The MAN summary paired with P1 carries the POS gross and fee."""
    data = _upload(client, two_establishment_file).json()

    est_a = data["establishments"][0]
    summaries = est_a["bundle"]["sales_summaries"]
    assert len(summaries) == 1
    assert summaries[0]["settlement_batch_id"] == "M1"
    assert summaries[0]["gross_value"] == "105.00"
    assert summaries[0]["fee_value"] == "5.00"
    assert summaries[0]["is_gross_pre_netted"] is False
    assert est_a["reconciliation"] == {"corrected": 1, "provisional": 0, "consumed": 1}
    assert est_a["summary"]["totals"]["gross_value"] == "105.00"
    assert est_a["summary"]["totals"]["adjustments_total"] == "-25.00"

    est_b = data["establishments"][1]
    assert est_b["bundle"]["sales_summaries"][0]["is_gross_pre_netted"] is True
    assert est_b["reconciliation"]["provisional"] == 1


def test_parse_file_without_reconciliation(client, two_establishment_file):
    """reconcile=false returns the summaries as reported."""
    data = _upload(client, two_establishment_file, reconcile="false").json()

    est_a = data["establishments"][0]
    assert len(est_a["bundle"]["sales_summaries"]) == 2
    assert est_a["reconciliation"] is None


def test_parse_file_single_establishment(client, two_establishment_file):
    """The establishment filter returns only that bundle."""
    data = _upload(client, two_establishment_file, establishment=EST_B).json()

    assert len(data["establishments"]) == 1
    bundle = data["establishments"][0]["bundle"]
    assert bundle["establishment_code"] == EST_B
    assert len(bundle["anticipations"]) == 1
    assert bundle["financial_adjustments"] == []
    assert bundle["header"] is not None


def test_parse_empty_file(client):
    """An empty upload is rejected with 400."""
    response = _upload(client, b"")
    assert response.status_code == 400


def test_parse_file_without_records(client):
    """A file where no line decodes is rejected with 422."""
    response = _upload(client, b"7FOO\r\n8BAR\r\n")
    assert response.status_code == 422
    assert "2 lines skipped" in response.json()["detail"]


# ------------------------------------------------------------------
# POST /decode-line
# ------------------------------------------------------------------


def test_decode_line(client):
    """A supported line comes back decoded."""
    response = client.post(
        "/api/v1/settlement/decode-line",
        json={"line": sales_summary_line(channel="MAN", gross=10000, net=10000, fee=0)},
    )

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["decoded"] is True
    assert data["record"]["record_type"] == 1
    assert data["record"]["capture_channel"] == "MAN"
    assert data["record"]["is_gross_pre_netted"] is True


def test_decode_line_unknown_type(client):
    """An unsupported line returns the skip reason."""
    response = client.post("/api/v1/settlement/decode-line", json={"line": "8XYZ"})

    data = response.json()
    assert data["decoded"] is False
    assert data["record"] is None
    assert data["reason"] == "unknown record type '8'"


# ------------------------------------------------------------------
# GET /runs
# ------------------------------------------------------------------


def test_list_runs(client, two_establishment_file):
    """Each parse leaves an audit row."""
    _upload(client, two_establishment_file)
    _upload(client, two_establishment_file, establishment=EST_A)

    response = client.get("/api/v1/settlement/runs")

    assert response.status_code == 200
    runs = response.json()
    assert len(runs) == 2
    filters = sorted(r["establishment_filter"] or "" for r in runs)
    assert filters == ["", EST_A]
    full_run = next(r for r in runs if r["establishment_filter"] is None)
    assert full_run["establishments"] == [EST_A, EST_B]
    assert full_run["corrected_count"] == 1
    assert full_run["provisional_count"] == 1
    assert full_run["skipped_lines"] == 1
    assert full_run["movement_date"] == "2026-02-20"


def test_list_runs_filters_by_movement_date(client, two_establishment_file):
    """GET /runs?movement_date= only returns runs of that day."""
    _upload(client, two_establishment_file)

    same_day = client.get(
        "/api/v1/settlement/runs", params={"movement_date": "2026-02-20"}
    )
    other_day = client.get(
        "/api/v1/settlement/runs", params={"movement_date": "2026-01-01"}
    )

    assert len(same_day.json()) == 1
    assert other_day.json() == []


def test_list_runs_pagination(client, two_establishment_file):
    for _ in range(3):
        _upload(client, two_establishment_file)

    response = client.get("/api/v1/settlement/runs", params={"page": 2, "limit": 2})

    assert response.status_code == 200
    assert len(response.json()) == 1
