"""Integration tests for API routes."""

from fastapi import status

from common.enums import MedicaidRecoveryStatus, MedicaidStatus


class TestRecoveryRoutes:
    """Test recovery evaluation endpoints."""

    def test_evaluate_baseline(self, client, encounter_data):
        """Baseline encounter evaluates with skipped optional evaluators."""
        response = client.post("/recovery/evaluate?as_of=2024-06-15", json=encounter_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["primary_recovery_path"] == "Financial Assistance Screening"
        assert data["engines_loaded"] == [
            "medicaid-recovery",
            "medicare-recovery",
            "dsh-relevance",
            "state-programs",
        ]
        assert data["outcomes"]["dsh-audit"] == {"status": "skipped", "reason": "missing dsh_audit"}
        assert data["magi_result"] is None

    def test_evaluate_active_medicaid(self, client, encounter_data):
        """Enums and nested results serialize to plain JSON."""
        encounter_data.update(medicaid_status=MedicaidStatus.ACTIVE.value, total_charges=100000)
        response = client.post("/recovery/evaluate?as_of=2024-06-15", json=encounter_data)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["medicaid"]["status"] == MedicaidRecoveryStatus.CONFIRMED.value
        assert data["projected_recovery"]["total"] == 45000
        assert data["state_program"]["archetype"] == "charity_care_reimb"

    def test_evaluate_with_optional_inputs(self, client, encounter_data):
        """Optional evaluator results are returned with dates as ISO strings."""
        encounter_data.update(
            gross_monthly_income=800,
            is_qualified_hpe_entity=True,
            patient_category="adult",
            denial_code="CO-50",
        )
        response = client.post("/recovery/evaluate?as_of=2024-06-15", json=encounter_data)

        data = response.json()
        assert data["outcomes"]["presumptive-eligibility"] == {"status": "ok", "reason": None}
        assert data["presumptive_eligibility"]["temporary_coverage_start"] == "2024-06-15"
        assert data["denial_analysis"]["appeal_deadline"] == "2024-12-12"

    def test_evaluate_invalid_enum(self, client, encounter_data):
        """Unknown enum values are rejected."""
        encounter_data["encounter_type"] = "spaceship"
        response = client.post("/recovery/evaluate", json=encounter_data)

        assert response.status_code == 422

    def test_evaluate_missing_required_field(self, client, encounter_data):
        del encounter_data["total_charges"]
        response = client.post("/recovery/evaluate", json=encounter_data)

        assert response.status_code == 422

    def test_validate_presumptive_eligibility(self, client):
        """Valid presumptive eligibility input passes."""
        response = client.post("/recovery/presumptive-eligibility/validate", json={
            "is_qualified_hpe_entity": True,
            "patient_category": "child",
            "gross_monthly_income": 1500,
            "household_size": 3,
            "state_of_residence": "NY",
            "application_date": "2024-06-15",
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"valid": True, "errors": []}

    def test_validate_presumptive_eligibility_errors(self, client):
        """Every bad field is reported."""
        response = client.post("/recovery/presumptive-eligibility/validate", json={
            "household_size": 0,
            "state_of_residence": "New York",
        })

        data = response.json()
        assert data["valid"] is False
        assert len(data["errors"]) == 6

    def test_get_denial_code(self, client):
        response = client.get("/recovery/denial-codes/50")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["category"] == "medical_necessity"
        assert data["base_recovery_rate"] == 0.45

    def test_get_unknown_denial_code(self, client):
        response = client.get("/recovery/denial-codes/9999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Unknown CARC code 9999"


class TestServiceRoutes:
    """Test root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "operational"

    def test_health(self, client):
        response = client.get("/health")

        assert response.json() == {"status": "healthy"}
