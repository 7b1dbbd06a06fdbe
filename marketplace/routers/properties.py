"""
Property API endpoints: public browse and detail, listing creation, and the owner dashboard.
"""

from fastapi import APIRouter, Depends, status, Query
from typing import Optional, List

from marketplace.models.property import Property
from marketplace.services.access_policy import Action, Principal
from marketplace.services.property import PropertyService
from marketplace.schemas.property import (
    PropertyCreate,
    PropertyResponse,
    PropertyWithOwnerResponse,
    PropertySearchFilters
)
from marketplace.schemas.error import get_error_responses
from marketplace.utils.dependencies import (
    get_property_service,
    require_access,
    require_property_access
)


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertyWithOwnerResponse],
    status_code=status.HTTP_200_OK,
    summary="Browse available properties",
    description="AVAILABLE listings, newest first. Every filter is optional and empty values are ignored.",
    responses=get_error_responses(400, 500)
)
async def list_properties(
    property_type: Optional[str] = Query(None, alias="type", description="HOUSE, APARTMENT, PLOT or AGRICULTURAL_LAND"),
    min_price: Optional[str] = Query(None, alias="minPrice", description="Inclusive lower price bound"),
    max_price: Optional[str] = Query(None, alias="maxPrice", description="Inclusive upper price bound"),
    bedrooms: Optional[str] = Query(None, description="Exact number of bedrooms"),
    city: Optional[str] = Query(None, description="Case-insensitive substring of the city"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyWithOwnerResponse]:
    # Query values arrive as raw strings so blank parameters can be dropped before type checks
    filters = PropertySearchFilters.model_validate({
        "type": property_type,
        "minPrice": min_price,
        "maxPrice": max_price,
        "bedrooms": bedrooms,
        "city": city,
    })

    properties = await property_service.browse_properties(filters)
    return [PropertyWithOwnerResponse.model_validate(prop.to_dict(include_owner=True)) for prop in properties]


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a listing owned by the caller. Any role may list; new listings start AVAILABLE.",
    responses=get_error_responses(400, 401, 500)
)
async def create_property(
    property_data: PropertyCreate,
    principal: Principal = Depends(require_access(Action.CREATE_PROPERTY)),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, principal)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.get(
    "/user",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List my properties",
    description="Every listing owned by the caller regardless of status, newest first",
    responses=get_error_responses(401, 500)
)
async def list_user_properties(
    principal: Principal = Depends(require_access(Action.LIST_OWN_PROPERTIES)),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties = await property_service.get_user_properties(principal)
    return [PropertyResponse.model_validate(prop.to_dict()) for prop in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyWithOwnerResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property by ID",
    description="Property detail with the owner's contact card, whatever its status",
    responses=get_error_responses(404, 500)
)
async def get_property(
    property_obj: Property = Depends(require_property_access(Action.VIEW_PROPERTY))
) -> PropertyWithOwnerResponse:
    return PropertyWithOwnerResponse.model_validate(property_obj.to_dict(include_owner=True))
