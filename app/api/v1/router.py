from fastapi import APIRouter
from api.v1.routes.email import router as email_router
from api.v1.routes.sms import router as sms_router
from api.v1.routes.trips import router as trips_router


# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(email_router)
router.include_router(sms_router)
router.include_router(trips_router)
