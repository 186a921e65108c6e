"""Public contact form endpoint."""

from fastapi import APIRouter, Depends, HTTPException, status

from agency_admin.application.schemas import ContactSubmissionCreate, ContactSubmissionResponse
from agency_admin.application.services import ContactService
from agency_admin.infrastructure.dependencies import get_contact_service

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=ContactSubmissionResponse)
async def submit_contact(
    data: ContactSubmissionCreate,
    service: ContactService = Depends(get_contact_service),
) -> ContactSubmissionResponse:
    """Store a contact request and notify the agency."""
    result = await service.submit(data)
    if not result.success:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.error)
    return ContactSubmissionResponse(
        success=True,
        message=(result.data or {}).get("message") or "Thank you for contacting us.",
    )
