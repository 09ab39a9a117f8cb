"""JWT authentication dependency for FastAPI."""
from fastapi import HTTPException, status, Request
from jose import jwt, JWTError
from pydantic import BaseModel
from typing import Optional
import os

AUTH_JWT_SECRET = os.environ.get("AUTH_JWT_SECRET", "dev-secret-change-me")
AUTH_JWT_ALGORITHM = os.environ.get("AUTH_JWT_ALGORITHM", "HS256")


class CurrentUser(BaseModel):
    """User information extracted from JWT."""
    user_id: str
    email: Optional[str] = None


async def get_current_user(request: Request) -> CurrentUser:
    """
    Validate the bearer token and extract the user identity.

    Raises:
        HTTPException: If the header is missing or the token is invalid or expired
    """
    auth_header = request.headers.get("authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid Authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = auth_header[7:]

    try:
        payload = jwt.decode(token, AUTH_JWT_SECRET, algorithms=[AUTH_JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id: Optional[str] = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user ID",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return CurrentUser(user_id=user_id, email=payload.get("email"))


def ensure_same_user(user_id: str, current_user: CurrentUser) -> None:
    """Reject requests for another user's resources."""
    if user_id != current_user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this user's resources"
        )
