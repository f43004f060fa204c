# Sign-up, sign-in, current identity and password reset
import logging
import re
from typing import Annotated, Callable
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlmodel import Session, select
from pydantic import BaseModel, field_validator

from ..database import get_session
from ..models import User
from ..security import (
    RESET_TOKEN,
    create_access_token,
    decode_claims,
    decode_token,
    get_password_hash,
    password_fingerprint,
    verify_password,
)
from ..config import settings

logger = logging.getLogger(__name__)

router = APIRouter()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 6
RESET_MESSAGE = "If an account exists for that email, a password reset code has been sent."
RESET_DONE_MESSAGE = "Your password has been reset. You can sign in now."
INVALID_RESET_TOKEN = "Invalid or expired reset code"


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address.")
    return value


def _check_password(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    return value


class UserCreate(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _check_password(value)


class PasswordResetRequest(BaseModel):
    email: str

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return _check_email(value)


class PasswordResetConfirm(BaseModel):
    token: str
    password: str

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _check_password(value)


class Token(BaseModel):
    access_token: str
    token_type: str


class UserRead(BaseModel):
    uid: str
    email: str


class MessageResponse(BaseModel):
    message: str


# Authorization: Bearer <token>
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


async def get_current_user(token: Annotated[str, Depends(oauth2_scheme)],
                           session: Session = Depends(get_session)) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    uid = decode_token(token)
    if uid is None:
        raise credentials_exception

    user = session.exec(select(User).where(User.uid == uid)).first()
    if user is None:
        raise credentials_exception
    return user


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(user_in: UserCreate, session: Session = Depends(get_session)):
    existing_user = session.exec(select(User).where(User.email == user_in.email)).first()
    if existing_user:
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(email=user_in.email, hashed_password=get_password_hash(user_in.password))
    session.add(new_user)
    session.commit()
    session.refresh(new_user)
    logger.info("Registered user %s", new_user.uid)
    return new_user


@router.post("/token", response_model=Token)
def login_for_access_token(form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
                           session: Session = Depends(get_session)):
    email = form_data.username.strip().lower()
    user = session.exec(select(User).where(User.email == email)).first()

    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {"access_token": create_access_token(subject=user.uid), "token_type": "bearer"}


@router.get("/me", response_model=UserRead)
def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


# Hands a freshly issued reset code to whatever delivers it to the user.
ResetDelivery = Callable[[User, str], None]


def log_reset_code(user: User, token: str):
    # no mailer is configured: the operator relays the code from the server log
    logger.info("Password reset code for %s (user %s): %s", user.email, user.uid, token)


def get_reset_delivery() -> ResetDelivery:
    return log_reset_code


@router.post("/password-reset", response_model=MessageResponse, status_code=status.HTTP_202_ACCEPTED)
def request_password_reset(payload: PasswordResetRequest,
                           session: Session = Depends(get_session),
                           deliver: ResetDelivery = Depends(get_reset_delivery)):
    """
    Issue a reset code for a registered email.

    The answer is the same whether or not the account exists. The code is a
    short-lived token bound to the current password hash, so it stops working
    once the password has been changed.
    """
    user = session.exec(select(User).where(User.email == payload.email)).first()
    if user is not None:
        token = create_access_token(
            subject=user.uid,
            expires_minutes=settings.RESET_TOKEN_EXPIRE_MINUTES,
            purpose=RESET_TOKEN,
            extra_claims={"pwd": password_fingerprint(user.hashed_password)},
        )
        deliver(user, token)
    return {"message": RESET_MESSAGE}


@router.post("/password-reset/confirm", response_model=MessageResponse)
def confirm_password_reset(payload: PasswordResetConfirm, session: Session = Depends(get_session)):
    claims = decode_claims(payload.token.strip(), purpose=RESET_TOKEN)
    if claims is None:
        raise HTTPException(status_code=400, detail=INVALID_RESET_TOKEN)

    user = session.exec(select(User).where(User.uid == claims["sub"])).first()
    if user is None or claims.get("pwd") != password_fingerprint(user.hashed_password):
        raise HTTPException(status_code=400, detail=INVALID_RESET_TOKEN)

    user.hashed_password = get_password_hash(payload.password)
    session.add(user)
    session.commit()
    logger.info("Password reset for user %s", user.uid)
    return {"message": RESET_DONE_MESSAGE}
