import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from clubhub.models import User, UserRole
from clubhub.auth.schemas import UserCreate
from clubhub.auth.utils import get_password_hash, verify_password
from typing import Optional

logger = logging.getLogger(__name__)

class UserService:
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email"""
        return db.query(User).filter(User.email == email.lower()).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def create_user(db: Session, user: UserCreate, otp_store) -> User:
        """Create a new user once their email OTP checks out"""
        if user.role == UserRole.ADMIN:
            raise ValueError("Admin accounts cannot be self-registered")

        if UserService.get_user_by_email(db, user.email):
            raise ValueError("Email already registered")

        otp_result = otp_store.verify(user.email, user.otp)
        if not otp_result.success:
            raise ValueError(otp_result.message)

        db_user = User(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email.lower(),
            password=get_password_hash(user.password),
            role=user.role.value,
        )

        try:
            db.add(db_user)
            db.commit()
            db.refresh(db_user)
        except IntegrityError:
            db.rollback()
            raise ValueError("Email already registered")

        logger.info("Registered user %s with role %s", db_user.id, db_user.role)
        return db_user

    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password"""
        user = UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.password):
            return None
        return user
