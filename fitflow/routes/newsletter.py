# fitflow/routes/newsletter.py
from typing import List

from fastapi import APIRouter, Depends, status

from ..api.dependencies import get_newsletter_service, require_admin
from ..principal import Principal
from ..schemas.newsletter import SubscribeRequest, SubscriberResponse
from ..services.newsletter_service import NewsletterService

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.post("/subscribe", response_model=SubscriberResponse, status_code=status.HTTP_201_CREATED)
def subscribe(
    payload: SubscribeRequest,
    service: NewsletterService = Depends(get_newsletter_service),
) -> SubscriberResponse:
    return SubscriberResponse.model_validate(service.subscribe(payload.name, payload.email))


@router.get("/subscribers", response_model=List[SubscriberResponse])
def list_subscribers(
    _: Principal = Depends(require_admin),
    service: NewsletterService = Depends(get_newsletter_service),
) -> List[SubscriberResponse]:
    return [SubscriberResponse.model_validate(s) for s in service.list_subscribers()]
