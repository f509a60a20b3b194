from .errors import ApiError
from .token_store import TokenStore
from .auth_client import AuthClient
from .participant_client import ParticipantClient
from .alerts import AlertSink
from .post_state import ParticipationState, PostParticipation
from .screens import ManageParticipants, PendingRequestsInbox
