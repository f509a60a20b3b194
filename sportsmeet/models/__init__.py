from sportsmeet.core.database import Base, engine

# Import all models here to ensure they are registered with Base
from .user import User
from .sports_post import SportsPost
from .participant import Participant
from .notification import Notification

# No migration tool yet; tables are created when the models package is imported.
Base.metadata.create_all(bind=engine)
