"""Tests for the assessment API endpoints.

Covers:
- POST /v1/assessments: scoring, validation errors, unknown sectors
- GET  /v1/assessments/{id}: round trip, 404, malformed id
- GET  /v1/assessments/{id}/report: headline, recommendations, CTAs
- GET  /v1/assessments/{id}/export.xlsx: workbook download
- GET  /v1/assessments/{id}/export.pdf: PDF download
- Configuration snapshot: admin changes apply to new assessments only
"""

import io

from openpyxl import load_workbook

from src.export.assessment_export import XLSX_MEDIA_TYPE
from src.export.assessment_pdf import PDF_MEDIA_TYPE


async def _create(client, payload) -> dict:
    response = await client.post("/v1/assessments", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateAssessment:
    async def test_create_scores_submission(self, client, submission_payload):
        data = await _create(client, submission_payload)

        assert data["company_name"] == "Gulf Build LLC"
        assert data["industry_sector"] == "Construction"
        assert data["company_location"] == "mainland"
        result = data["result"]
        assert result["required_count"] == 2
        assert result["valid_count"] == 0
        assert result["gap"] == 2
        assert result["fine_estimate"] == 192000
        assert result["risk_score"] == 50
        assert result["risk_level"] == "medium"

    async def test_create_includes_report(self, client, submission_payload):
        data = await _create(client, submission_payload)
        report = data["report"]
        assert report["headline"] == "Medium Risk"
        assert report["recommendations"][0].startswith("Hire 2 additional Emiratis")
        download = [c for c in report["calls_to_action"] if c["kind"] == "download_report"]
        assert download[0]["target"] == (
            f"/v1/assessments/{data['assessment_id']}/export.xlsx"
        )

    async def test_freezone_exempt(self, client, submission_payload):
        submission_payload["company_location"] = "freezone"
        data = await _create(client, submission_payload)
        assert data["result"]["required_count"] == 0
        assert data["result"]["risk_level"] == "low"

    async def test_not_sure_payroll_gets_no_credit(self, client, submission_payload):
        submission_payload.update(
            emirati_employees=2, wps_gpssa_compliant="not_sure",
        )
        data = await _create(client, submission_payload)
        assert data["result"]["valid_count"] == 0

    async def test_recent_departure_bonus(self, client, submission_payload):
        submission_payload.update(
            emirati_employees=3,
            emirati_left_recently="yes",
            departure_days_ago=45,
        )
        data = await _create(client, submission_payload)
        assert data["result"]["valid_count"] == 1
        assert data["result"]["gap"] == 1

    async def test_skilled_over_total_rejected(self, client, submission_payload):
        submission_payload["skilled_employees"] = 40
        response = await client.post("/v1/assessments", json=submission_payload)
        assert response.status_code == 422

    async def test_departure_days_required(self, client, submission_payload):
        submission_payload["emirati_left_recently"] = "yes"
        response = await client.post("/v1/assessments", json=submission_payload)
        assert response.status_code == 422

    async def test_missing_contact_rejected(self, client, submission_payload):
        del submission_payload["contact"]
        response = await client.post("/v1/assessments", json=submission_payload)
        assert response.status_code == 422

    async def test_bad_email_rejected(self, client, submission_payload):
        submission_payload["contact"]["email"] = "not-an-email"
        response = await client.post("/v1/assessments", json=submission_payload)
        assert response.status_code == 422

    async def test_unknown_sector_rejected(self, client, submission_payload):
        submission_payload["industry_sector"] = "Space Tourism"
        response = await client.post("/v1/assessments", json=submission_payload)
        assert response.status_code == 422
        assert "Space Tourism" in response.json()["detail"]


class TestGetAssessment:
    async def test_get_round_trip(self, client, submission_payload):
        created = await _create(client, submission_payload)
        response = await client.get(f"/v1/assessments/{created['assessment_id']}")
        assert response.status_code == 200
        data = response.json()
        assert data["assessment_id"] == created["assessment_id"]
        assert data["result"] == created["result"]

    async def test_get_missing(self, client):
        response = await client.get("/v1/assessments/00000000-0000-0000-0000-000000000000")
        assert response.status_code == 404

    async def test_get_malformed_id(self, client):
        response = await client.get("/v1/assessments/not-a-uuid")
        assert response.status_code == 422

    async def test_get_report(self, client, submission_payload):
        created = await _create(client, submission_payload)
        response = await client.get(f"/v1/assessments/{created['assessment_id']}/report")
        assert response.status_code == 200
        report = response.json()
        assert report["risk_level"] == "medium"
        assert report["risk_score"] == 50
        assert report["recommendations"][-1].startswith("Run regular compliance audits")

    async def test_report_missing(self, client):
        response = await client.get(
            "/v1/assessments/00000000-0000-0000-0000-000000000000/report",
        )
        assert response.status_code == 404


class TestExportXlsx:
    async def test_download(self, client, submission_payload):
        created = await _create(client, submission_payload)
        response = await client.get(
            f"/v1/assessments/{created['assessment_id']}/export.xlsx",
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == XLSX_MEDIA_TYPE
        disposition = response.headers["content-disposition"]
        assert "emiratisation-compliance-report-gulf_build_llc-" in disposition
        assert disposition.endswith('.xlsx"')

        wb = load_workbook(io.BytesIO(response.content))
        assert wb.sheetnames == [
            "Assessment Summary", "Recommendations", "Detailed Analysis",
        ]

    async def test_download_missing(self, client):
        response = await client.get(
            "/v1/assessments/00000000-0000-0000-0000-000000000000/export.xlsx",
        )
        assert response.status_code == 404

    async def test_arabic_company_name_uses_id(self, client, submission_payload):
        submission_payload["contact"]["company_name"] = "شركة الخليج للبناء"
        created = await _create(client, submission_payload)
        response = await client.get(
            f"/v1/assessments/{created['assessment_id']}/export.xlsx",
        )
        assert response.status_code == 200
        slug = created["assessment_id"].replace("-", "_")
        assert f"emiratisation-compliance-report-{slug}-" in (
            response.headers["content-disposition"]
        )


class TestExportPdf:
    async def test_download(self, client, submission_payload):
        created = await _create(client, submission_payload)
        response = await client.get(
            f"/v1/assessments/{created['assessment_id']}/export.pdf",
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == PDF_MEDIA_TYPE
        disposition = response.headers["content-disposition"]
        assert "emiratisation-compliance-report-gulf_build_llc-" in disposition
        assert disposition.endswith('.pdf"')
        assert response.content.startswith(b"%PDF")

    async def test_download_missing(self, client):
        response = await client.get(
            "/v1/assessments/00000000-0000-0000-0000-000000000000/export.pdf",
        )
        assert response.status_code == 404


class TestConfigurationSnapshot:
    async def test_new_fine_applies_to_new_assessments_only(
        self, client, submission_payload, admin_headers,
    ):
        before = await _create(client, submission_payload)

        response = await client.put(
            "/v1/admin/configuration",
            json={"key": "fine_per_emirati", "value": "50000"},
            headers=admin_headers,
        )
        assert response.status_code == 200

        after = await _create(client, submission_payload)
        assert after["result"]["fine_estimate"] == 100000

        reloaded = await client.get(f"/v1/assessments/{before['assessment_id']}")
        assert reloaded.json()["result"]["fine_estimate"] == 192000

    async def test_report_uses_stored_grace_period(
        self, client, submission_payload, admin_headers,
    ):
        submission_payload.update(emirati_left_recently="yes", departure_days_ago=45)
        created = await _create(client, submission_payload)

        await client.put(
            "/v1/admin/configuration",
            json={"key": "grace_period_days", "value": "30"},
            headers=admin_headers,
        )

        response = await client.get(f"/v1/assessments/{created['assessment_id']}/report")
        recs = response.json()["recommendations"]
        assert any("within 45 days" in r for r in recs)

    async def test_stored_sectors_drive_designation(
        self, client, submission_payload, admin_headers,
    ):
        seeded = await client.post("/v1/admin/sectors/seed", headers=admin_headers)
        assert seeded.status_code == 201
        added = await client.post(
            "/v1/admin/sectors",
            json={"name": "Fintech", "is_designated": True},
            headers=admin_headers,
        )
        assert added.status_code == 201

        submission_payload["industry_sector"] = "Fintech"
        data = await _create(client, submission_payload)
        assert data["result"]["required_count"] == 2
