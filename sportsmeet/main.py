import logging

from fastapi import FastAPI

from sportsmeet.api.endpoints import auth as auth_endpoints
from sportsmeet.api.endpoints import users as user_endpoints
from sportsmeet.api.endpoints import sports_posts as sports_post_endpoints
from sportsmeet.api.endpoints import participants as participant_endpoints
from sportsmeet.api.endpoints import notifications as notification_endpoints
from sportsmeet.core.logging_config import configure_logging

# Importing the models package creates the tables
import sportsmeet.models

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Sportsmeet API")

# The participants router is mounted before the posts router; both share the /api/sports-posts prefix
app.include_router(auth_endpoints.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(user_endpoints.router, prefix="/api/users", tags=["Users"])
app.include_router(participant_endpoints.router, prefix="/api/sports-posts/participants", tags=["Participants"])
app.include_router(sports_post_endpoints.router, prefix="/api/sports-posts", tags=["Sports posts"])
app.include_router(notification_endpoints.router, prefix="/api/notifications", tags=["Notifications"])


@app.get("/")
async def read_root():
    return {"message": "Sportsmeet API"}

logger.info("Sportsmeet API ready")
