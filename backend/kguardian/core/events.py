import json
import logging
import redis.asyncio as redis
from redis.exceptions import RedisError
from .config import settings

logger = logging.getLogger(__name__)

INCIDENTS_CHANNEL = "kguardian_incidents"

class IncidentPublisher:
    """Announces new reports on a redis channel for the security team's consumers."""

    def __init__(self, client, channel: str = INCIDENTS_CHANNEL):
        self.client = client
        self.channel = channel

    async def incident_reported(self, incident) -> bool:
        message_data = {
            "type": "incident_reported",
            "id": incident.id,
            "title": incident.title,
            "incident_type": incident.incident_type,
            "location": incident.location,
            "status": incident.status,
            "reported_by": incident.reported_by,
            "created_at": incident.created_at.isoformat() if incident.created_at else None,
        }
        try:
            await self.client.publish(self.channel, json.dumps(message_data))
        except (RedisError, OSError) as e:
            # the report is already stored; a missed notification is not fatal
            logger.warning("Could not publish incident %s: %s", incident.id, e)
            return False
        return True

redis_client = redis.from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True,
    socket_connect_timeout=settings.REDIS_TIMEOUT,
    socket_timeout=settings.REDIS_TIMEOUT,
)

publisher = IncidentPublisher(redis_client)

def get_publisher() -> IncidentPublisher:
    return publisher
