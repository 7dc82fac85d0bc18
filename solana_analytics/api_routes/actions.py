"""API routes exposing the analytics actions."""

# Standard library imports
import json
from typing import Any, Dict, List, Optional

# Third-party library imports
from fastapi import APIRouter, Body, Depends, Path, Request

# Internal imports
from solana_analytics.actions import ACTIONS, get_action
from solana_analytics.logging_config import get_logger, log_with_context
from solana_analytics.services.analytics_service import AnalyticsService

# Set up logging
logger = get_logger(__name__)

# Create router
router = APIRouter(
    prefix="/actions",
    tags=["actions"],
)


def get_analytics_service(request: Request) -> AnalyticsService:
    """Return the analytics service created by the application lifespan."""
    return request.app.state.analytics_service


@router.get("")
async def list_actions() -> List[Dict[str, Any]]:
    """List every action with its description and parameter schema."""
    return [action.describe() for action in ACTIONS]


@router.post("/{name}")
async def run_action(
    name: str = Path(..., description="The action name"),
    params: Optional[Dict[str, Any]] = Body(None, description="Action parameter object"),
    service: AnalyticsService = Depends(get_analytics_service)
) -> Any:
    """Run an action and return its decoded JSON result.

    Args:
        name: The action name
        params: Action parameter object
        service: The analytics service

    Returns:
        The action result
    """
    action = get_action(name)
    log_with_context(logger, "info", "Action requested", action=name)

    result = await action.invoke(service, params or {})
    return json.loads(result)
