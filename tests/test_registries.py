"""Tests for registry document validation and quality seeding."""

import pytest

from docvault.core.exceptions import InvalidDocumentError
from docvault.documents.registries import seed_quality_from_results, validate_document
from docvault.models.registries import DataType, PromptRegistry, ResultsDocument


class TestValidateDocument:
    """Tests for validate_document."""

    def test_unregistered_container_is_passed_through(self):
        body = {"anything": {"goes": [1, 2]}}

        assert validate_document("Notes", body) is body

    def test_body_must_be_an_object(self):
        with pytest.raises(InvalidDocumentError, match="JSON object"):
            validate_document("Notes", "plain text")

    def test_prompt_registry_defaults_and_aliases(self):
        document = validate_document(
            "Prompts",
            {"fields": [{"sectionName": "Parties", "fieldName": "Lender", "prompt": "Who lends?"}]},
        )

        assert document["id"]
        assert document["persona"] == "Default"
        assert document["fields"] == [
            {
                "sectionName": "Parties",
                "fieldName": "Lender",
                "prompt": "Who lends?",
                "dataType": "text",
            }
        ]

    def test_snake_case_input_is_accepted(self):
        document = validate_document("Results", {"document_name": "a.pdf", "doc_type": "Loan"})

        assert document["documentName"] == "a.pdf"
        assert document["docType"] == "Loan"

    def test_unknown_keys_are_kept(self):
        document = validate_document("Personas", {"id": "hr", "name": "HR", "owner": "ops"})

        assert document == {"id": "hr", "name": "HR", "description": "", "owner": "ops"}

    def test_missing_required_field(self):
        with pytest.raises(InvalidDocumentError, match="Invalid Quality document"):
            validate_document("Quality", {"querySet": "Loan"})

    def test_invalid_data_type(self):
        with pytest.raises(InvalidDocumentError, match="1 validation error"):
            validate_document("Prompts", {"fields": [{"dataType": "colour"}]})

    def test_data_type_values(self):
        registry = PromptRegistry.model_validate({"fields": [{"dataType": "summary50"}]})

        assert registry.fields[0].data_type is DataType.SUMMARY_50


class TestSeedQuality:
    """Tests for seed_quality_from_results."""

    @pytest.fixture
    def results(self):
        return ResultsDocument.model_validate(
            {
                "id": "r-1",
                "documentName": "loan.pdf",
                "docType": "LoanAgreement",
                "persona": "Legal",
                "fields": [
                    {"fieldName": "Lender", "extractionPrompt": "Who lends?", "answer": "ACME"},
                    {"fieldName": "Amount", "extractionPrompt": "How much?", "answer": "10,000"},
                ],
            }
        )

    def test_fields_become_unreviewed(self, results):
        quality = seed_quality_from_results(results)

        assert quality.file_name == "loan.pdf"
        assert quality.query_set == "LoanAgreement"
        assert quality.persona == "Legal"
        assert [f.field_name for f in quality.fields] == ["Lender", "Amount"]
        assert quality.fields[0].answer == "ACME"
        assert quality.fields[0].quality_answer == ""
        assert quality.fields[0].approved is False
        assert quality.created_at.endswith("Z")

    def test_explicit_id_is_used(self, results):
        assert seed_quality_from_results(results, quality_id="q-9").id == "q-9"

    def test_falls_back_to_object_tags(self):
        results = ResultsDocument(document_name="loan.pdf")

        quality = seed_quality_from_results(
            results, object_tags={"doctype": "LoanAgreement", "persona": "HR"}
        )

        assert quality.query_set == "LoanAgreement"
        assert quality.persona == "HR"

    def test_results_values_win_over_tags(self, results):
        quality = seed_quality_from_results(results, object_tags={"persona": "HR"})

        assert quality.persona == "Legal"

    def test_empty_results_get_one_blank_field(self):
        quality = seed_quality_from_results(ResultsDocument(document_name="empty.pdf"))

        assert len(quality.fields) == 1
        assert quality.fields[0].field_name == ""
        assert quality.query_set == ""
