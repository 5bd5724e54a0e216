# folio/auth.py
import aiohttp
import logging
from typing import Optional
from fastapi import Request, HTTPException, WebSocket
from pydantic import BaseModel
from folio.config import AUTH_SERVICE_URL

logger = logging.getLogger(__name__)

ANONYMOUS_USER_ID = 'demo_user'


class TaskFlowUser(BaseModel):
    id: str
    is_authenticated: bool = False


class AuthClient:
    _session: Optional[aiohttp.ClientSession] = None

    @classmethod
    async def get_session(cls) -> aiohttp.ClientSession:
        """Get or create singleton aiohttp ClientSession."""
        if cls._session is None or cls._session.closed:
            cls._session = aiohttp.ClientSession()
            logger.info("Created new aiohttp ClientSession for auth verification")
        return cls._session

    @classmethod
    async def close(cls):
        """Close the singleton aiohttp ClientSession."""
        if cls._session and not cls._session.closed:
            await cls._session.close()
            logger.info("Closed aiohttp ClientSession for auth verification")
        cls._session = None


async def verify_token(token: str) -> str:
    """Verify a bearer token via auth-service and return the username."""
    verify_url = f"{AUTH_SERVICE_URL}/verify"
    try:
        session = await AuthClient.get_session()
        async with session.get(verify_url, headers={'Authorization': f'Bearer {token}'}) as resp:
            data = await resp.json()
            if resp.status != 200 or data.get('status') != 'success':
                raise HTTPException(status_code=401, detail='Invalid or expired token')
            username = data.get('data', {}).get('username')
            if not username:
                raise HTTPException(status_code=401, detail='Invalid token payload')
            return username
    except aiohttp.ClientError:
        raise HTTPException(status_code=502, detail='Auth service not reachable')


async def _user_from_header(auth_header: Optional[str]) -> TaskFlowUser:
    if not auth_header:
        return TaskFlowUser(id=ANONYMOUS_USER_ID)
    if not auth_header.startswith('Bearer '):
        raise HTTPException(status_code=401, detail='Authorization header missing or invalid')
    token = auth_header.split(' ', 1)[1].strip()
    if not token:
        raise HTTPException(status_code=401, detail='Authorization header missing or invalid')
    username = await verify_token(token)
    return TaskFlowUser(id=username, is_authenticated=True)


async def resolve_user(request: Request) -> TaskFlowUser:
    """TaskFlow identity: anonymous demo user without a header, verified user with a Bearer token."""
    return await _user_from_header(request.headers.get('Authorization'))


async def resolve_websocket_user(websocket: WebSocket) -> TaskFlowUser:
    # Browsers cannot set headers on WebSocket handshakes, so ?token= is accepted too
    token = websocket.query_params.get('token')
    header = f'Bearer {token}' if token else websocket.headers.get('Authorization')
    return await _user_from_header(header)
