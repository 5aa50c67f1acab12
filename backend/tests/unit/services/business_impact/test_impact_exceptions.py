"""
Tests for business impact exceptions.
"""

import pytest

from app.services.business_impact import (
    ImpactAnalysisError,
    InvalidImpactRequestError,
    ProjectNotFoundError,
    RuleCatalogUnavailableError,
)


@pytest.mark.unit
class TestExceptionHierarchy:
    """Test exception class hierarchy"""

    def test_impact_analysis_error_is_base_exception(self):
        exc = ImpactAnalysisError("test error")
        assert isinstance(exc, Exception)
        assert str(exc) == "test error"

    def test_invalid_request_inherits_from_base(self):
        assert isinstance(InvalidImpactRequestError("empty"), ImpactAnalysisError)

    def test_catalog_unavailable_inherits_from_base(self):
        assert isinstance(RuleCatalogUnavailableError("down"), ImpactAnalysisError)

    def test_project_not_found_message(self):
        exc = ProjectNotFoundError("proj-9")

        assert isinstance(exc, ImpactAnalysisError)
        assert exc.project_id == "proj-9"
        assert str(exc) == "Project not found: proj-9"

    def test_catch_base_catches_all(self):
        for exc in [
            InvalidImpactRequestError("a"),
            ProjectNotFoundError("b"),
            RuleCatalogUnavailableError("c"),
        ]:
            with pytest.raises(ImpactAnalysisError):
                raise exc
