import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from clubhub.database import get_db
from clubhub.auth.schemas import UserCreate, User, LoginRequest, AuthResponse, OTPRequest
from clubhub.auth.service import UserService
from clubhub.auth.utils import create_access_token
from clubhub.auth.dependencies import get_current_user, get_otp_store

logger = logging.getLogger(__name__)

router = APIRouter()

@router.post("/send-otp")
def send_otp(request: OTPRequest, db: Session = Depends(get_db), otp_store = Depends(get_otp_store)):
    """Issue an email verification code"""
    if UserService.get_user_by_email(db, request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    otp_store.issue(request.email)
    # No mail transport here; the store logs the code at DEBUG
    logger.info("OTP issued for %s", request.email)
    return {"message": "OTP sent to your email"}

@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
def register_user(user: UserCreate, db: Session = Depends(get_db), otp_store = Depends(get_otp_store)):
    """Register a new user"""
    try:
        return UserService.create_user(db=db, user=user, otp_store=otp_store)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

@router.post("/login", response_model=AuthResponse)
def login(login_data: LoginRequest, db: Session = Depends(get_db)):
    """Log in with email and password"""
    user = UserService.authenticate_user(db, login_data.email, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": user.id, "role": user.role})
    return AuthResponse(
        access_token=access_token,
        token_type="bearer",
        user=User.model_validate(user)
    )

@router.get("/me", response_model=User)
def read_users_me(current_user = Depends(get_current_user)):
    """Get current user profile"""
    return current_user
