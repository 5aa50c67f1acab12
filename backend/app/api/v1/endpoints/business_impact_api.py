"""
Business Impact API
READ-ONLY endpoints exposing the rule impact chain and the impact graph of a Pull Request
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ....services.business_impact import (
    BusinessImpactRequest,
    BusinessImpactService,
    ImpactChainReport,
    ImpactGraphReport,
    InvalidImpactRequestError,
    ProjectNotFoundError,
    get_business_impact_service,
    validate_changed_files,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/risk/business-impact", tags=["Business Impact"])


@router.post(
    "/chain",
    response_model=ImpactChainReport,
    summary="Analyze business rule impact chain",
    description="Rules directly implemented by the changed files plus rules downstream of them (max 3 hops)",
)
def analyze_impact_chain(
    request: BusinessImpactRequest,
    service: BusinessImpactService = Depends(get_business_impact_service),
) -> ImpactChainReport:
    """
    Analyze the cross-rule impact chain of a Pull Request.

    Does not recalculate risk or change any data.

    Returns:
        ImpactChainReport with direct, indirect and cascade impacts

    Example Response:
        {
            "pull_request_id": "PR-789",
            "direct_impacts": [{"rule_id": "BR-PAYMENT-001", "dependency_path": ["BR-PAYMENT-001"], ...}],
            "indirect_impacts": [{"rule_id": "BR-INVOICE-003", "dependency_path": ["BR-PAYMENT-001", "BR-INVOICE-003"], ...}],
            "cascade_impacts": [],
            "summary": {"total_rules_affected": 2, "highest_criticality": "CRITICAL", ...}
        }
    """
    logger.info(f"Impact chain requested for PR {request.pull_request_id}")

    try:
        changed_files = validate_changed_files(request.changed_files)
        report = service.compute_impact_chain(changed_files, request.pull_request_id, request.project_id)

        logger.info(
            f"Impact chain for PR {request.pull_request_id}: "
            f"{report.summary.total_rules_affected} rules "
            f"({report.summary.direct}D, {report.summary.indirect}I, {report.summary.cascade}C)"
        )
        return report

    except InvalidImpactRequestError as e:
        logger.warning(f"Invalid impact chain request for PR {request.pull_request_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error analyzing impact chain for PR {request.pull_request_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to analyze impact chain"
        )


@router.post(
    "/graph",
    response_model=ImpactGraphReport,
    summary="Generate business impact graph",
    description="Nodes and edges of every impacted rule, ready for graph visualization",
)
def generate_impact_graph(
    request: BusinessImpactRequest,
    service: BusinessImpactService = Depends(get_business_impact_service),
) -> ImpactGraphReport:
    """
    Generate the systemic impact graph of a Pull Request.

    Edges only connect rules present in ``nodes``.
    """
    logger.info(f"Impact graph requested for PR {request.pull_request_id}")

    try:
        changed_files = validate_changed_files(request.changed_files)
        report = service.compute_impact_graph(changed_files, request.pull_request_id, request.project_id)

        logger.info(
            f"Impact graph for PR {request.pull_request_id}: {len(report.nodes)} nodes, {len(report.edges)} edges"
        )
        return report

    except InvalidImpactRequestError as e:
        logger.warning(f"Invalid impact graph request for PR {request.pull_request_id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ProjectNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating impact graph for PR {request.pull_request_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to generate impact graph"
        )
