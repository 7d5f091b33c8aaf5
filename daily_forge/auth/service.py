import logging
from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError

from daily_forge.core.config import SECRET_KEY, ALGORITHM

logger = logging.getLogger(__name__)
bearer = HTTPBearer()


def decode_token(token: str) -> dict:
    """
    Decodes and validates a JWT token.

    Args:
        token (str): JWT string.

    Returns:
        dict: Decoded payload.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM], options={"verify_aud": False})
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired authentication token")


def get_current_user_id(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
) -> str:
    """
    Extracts the user ID from the JWT token's `sub` claim.

    Raises:
        HTTPException: If token is invalid or missing the subject.
    """
    payload = decode_token(creds.credentials)
    user_id = payload.get("sub")
    if user_id is None or str(user_id).strip() == "":
        raise HTTPException(status_code=401, detail="Token missing subject field")
    return str(user_id)
