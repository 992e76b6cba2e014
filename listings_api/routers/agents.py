"""
Agent API endpoints. Agents carry a single optional profile image.
"""

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from listings_api.models.agent import Agent
from listings_api.services.agent import AgentService
from listings_api.schemas.agent import AgentFields, AgentResponse, AgentMutationResponse
from listings_api.utils.dependencies import get_agent_service, get_base_url
from listings_api.utils.exceptions import APIException, InternalServerError
from listings_api.utils.image_paths import format_image_url
from listings_api.schemas.error import get_crud_error_responses, get_read_error_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agents", tags=["Agents"])


def to_agent_response(agent: Agent, base_url: str) -> AgentResponse:
    """Serialize an agent with its image path expanded to an absolute URL."""
    data = agent.to_dict()
    data["image"] = format_image_url(data["image"], base_url)
    return AgentResponse.model_validate(data)


@router.post(
    "",
    response_model=AgentMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create agent",
    responses=get_crud_error_responses()
)
async def create_agent(
    name: Optional[str] = Form(None),
    mobile_number: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    agent_service: AgentService = Depends(get_agent_service)
) -> AgentMutationResponse:
    """
    Create an agent.

    Raises:
        MissingFieldsError: If name or mobile_number is missing
        InternalServerError: If the agent cannot be stored
    """
    agent_data = AgentFields(name=name, mobile_number=mobile_number)

    try:
        agent = await agent_service.create_agent(agent_data, image)
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error creating agent: {e}")
        raise InternalServerError("Error creating agent. Please try again later.", error_detail=str(e))

    return AgentMutationResponse(message="Agent created successfully", agent_id=agent.id)


@router.get(
    "",
    response_model=List[AgentResponse],
    status_code=status.HTTP_200_OK,
    summary="List agents",
    responses=get_read_error_responses()
)
async def list_agents(
    base_url: str = Depends(get_base_url),
    agent_service: AgentService = Depends(get_agent_service)
) -> List[AgentResponse]:
    try:
        agents = await agent_service.list_agents()
    except SQLAlchemyError as e:
        raise InternalServerError("Error fetching agents", error_detail=str(e))

    return [to_agent_response(agent, base_url) for agent in agents]


@router.get(
    "/{agent_id}",
    response_model=AgentResponse,
    status_code=status.HTTP_200_OK,
    summary="Get agent by ID",
    responses=get_read_error_responses()
)
async def get_agent(
    agent_id: int = Path(..., description="Agent ID"),
    base_url: str = Depends(get_base_url),
    agent_service: AgentService = Depends(get_agent_service)
) -> AgentResponse:
    try:
        agent = await agent_service.get_agent(agent_id)
    except APIException:
        raise
    except SQLAlchemyError as e:
        raise InternalServerError("Error fetching agent", error_detail=str(e))

    return to_agent_response(agent, base_url)


@router.put(
    "/{agent_id}",
    response_model=AgentMutationResponse,
    status_code=status.HTTP_200_OK,
    summary="Update agent",
    description="Partially update an agent; a new image replaces the current one.",
    responses=get_crud_error_responses()
)
async def update_agent(
    agent_id: int = Path(..., description="Agent ID"),
    name: Optional[str] = Form(None),
    mobile_number: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    agent_service: AgentService = Depends(get_agent_service)
) -> AgentMutationResponse:
    agent_data = AgentFields(name=name, mobile_number=mobile_number)

    try:
        await agent_service.update_agent(agent_id, agent_data, image)
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating agent {agent_id}: {e}")
        raise InternalServerError("Error updating agent. Please try again later.", error_detail=str(e))

    return AgentMutationResponse(message="Agent updated successfully", agent_id=agent_id)


@router.delete(
    "/{agent_id}",
    response_model=AgentMutationResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete agent",
    responses=get_crud_error_responses()
)
async def delete_agent(
    agent_id: int = Path(..., description="Agent ID"),
    agent_service: AgentService = Depends(get_agent_service)
) -> AgentMutationResponse:
    try:
        await agent_service.delete_agent(agent_id)
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error deleting agent {agent_id}: {e}")
        raise InternalServerError("Error deleting agent. Please try again later.", error_detail=str(e))

    return AgentMutationResponse(message="Agent deleted successfully", agent_id=agent_id)
