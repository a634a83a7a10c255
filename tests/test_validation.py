"""Tests for upload validation against per-variant policies."""

import pytest

from knowledge_ingest import (
    FileTooLarge,
    ImageFileRejected,
    OwnerKind,
    Settings,
    UnsupportedFileType,
    ValidationError,
    ValidationPolicy,
    validate_file,
)
from knowledge_ingest.media_types import POWERPOINT_TYPES, RTF_TYPES

MB = 1024 * 1024
PDF = "application/pdf"
PPTX = "application/vnd.openxmlformats-officedocument.presentationml.presentation"


@pytest.fixture
def agent_policy():
    return ValidationPolicy.for_owner(OwnerKind.AGENT, Settings())


@pytest.fixture
def company_policy():
    return ValidationPolicy.for_owner(OwnerKind.COMPANY, Settings())


def test_variant_policies(agent_policy, company_policy):
    assert agent_policy.max_file_size == 10 * MB
    assert agent_policy.reject_images is True
    assert agent_policy.disabled_types == POWERPOINT_TYPES | RTF_TYPES

    assert company_policy.max_file_size == 50 * MB
    assert company_policy.reject_images is False
    assert company_policy.disabled_types == frozenset()


def test_size_ceiling_from_settings():
    policy = ValidationPolicy.for_owner(OwnerKind.AGENT, Settings(AGENT_MAX_FILE_SIZE=1024))
    assert policy.max_file_size == 1024


@pytest.mark.parametrize(
    "file_type",
    [
        "text/plain",
        "text/markdown",
        "application/json",
        PDF,
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.oasis.opendocument.text",
    ],
)
def test_supported_types_accepted(agent_policy, file_type):
    validate_file(file_type, 1024, agent_policy)


def test_disabled_type_passes_validation(agent_policy):
    """Test PowerPoint is allow-listed even where extraction refuses it."""
    validate_file(PPTX, 1024, agent_policy)


def test_image_rejected_for_agent(agent_policy):
    with pytest.raises(ImageFileRejected, match="Image files are not supported"):
        validate_file("image/png", 1024, agent_policy)


def test_image_unsupported_for_company(company_policy):
    """Test images fall through to the allow-list check when not rejected outright."""
    with pytest.raises(UnsupportedFileType, match="Unsupported file type: image/png"):
        validate_file("image/png", 1024, company_policy)


def test_image_check_runs_before_size(agent_policy):
    with pytest.raises(ImageFileRejected):
        validate_file("image/jpeg", 500 * MB, agent_policy)


def test_unknown_type_rejected(agent_policy):
    with pytest.raises(UnsupportedFileType) as exc_info:
        validate_file("application/x-msdownload", 1024, agent_policy)

    assert "Supported types:" in str(exc_info.value)
    assert isinstance(exc_info.value, ValidationError)


def test_file_too_large_for_agent(agent_policy):
    with pytest.raises(FileTooLarge, match=r"File size \(11\.0MB\) exceeds the maximum allowed size of 10MB"):
        validate_file(PDF, 11 * MB, agent_policy)


def test_same_size_accepted_for_company(company_policy):
    validate_file(PDF, 11 * MB, company_policy)


def test_size_at_ceiling_accepted(agent_policy):
    validate_file(PDF, 10 * MB, agent_policy)


def test_file_too_large_for_company(company_policy):
    with pytest.raises(FileTooLarge, match="maximum allowed size of 50MB"):
        validate_file(PDF, 50 * MB + 1, company_policy)
