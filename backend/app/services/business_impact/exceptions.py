"""
Custom exceptions for business impact analysis.

The propagation engine itself never raises for data-shape anomalies (stale
rule ids, dangling edges, cycles). These exceptions cover the request layer
and failures of the catalog behind the repositories.
"""


class ImpactAnalysisError(Exception):
    """
    Base exception for all impact analysis errors.

    Example:
        >>> try:
        ...     service.compute_impact_chain(files)
        ... except ImpactAnalysisError as e:
        ...     logger.error(f"Impact analysis failed: {e}")
    """

    pass


class InvalidImpactRequestError(ImpactAnalysisError):
    """Raised when a request carries no changed files."""

    pass


class ProjectNotFoundError(ImpactAnalysisError):
    """Raised when an explicit project scope does not resolve."""

    def __init__(self, project_id: str):
        self.project_id = project_id
        super().__init__(f"Project not found: {project_id}")


class RuleCatalogUnavailableError(ImpactAnalysisError):
    """
    Raised when a catalog repository fails while building the rule graph.

    Wraps the original exception as ``__cause__``; the API layer maps it to
    HTTP 500.
    """

    pass
