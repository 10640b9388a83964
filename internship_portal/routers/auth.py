from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from internship_portal.database.config.db import get_db
from internship_portal.database.models.auth import User, UserRole
from internship_portal.schema.auth import RegisterUser, LoginRequest, Token, UserResponse
from internship_portal.utils.auth import (
    verify_password,
    get_password_hash,
    create_access_token,
    get_current_user,
)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


@auth_router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED
)
def register(
    body: RegisterUser,
    db: Session = Depends(get_db),
):
    """
    Register a new student or mentor account.
    """
    # Check if user already exists
    existing_user = db.query(User).filter(User.email == body.email).first()
    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )

    new_user = User(
        email=body.email,
        password_hash=get_password_hash(body.password),
        name=body.name,
        role=UserRole(body.role).value,
        city=body.city,
        interests=body.interests,
        linkedin_url=body.linkedin_url,
        portfolio_url=body.portfolio_url,
    )

    try:
        db.add(new_user)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )
    db.refresh(new_user)

    return new_user


@auth_router.post("/login", response_model=Token)
def login(
    form_data: LoginRequest,
    db: Session = Depends(get_db),
):
    """
    Login and get access token.
    """
    user = db.query(User).filter(User.email == form_data.email).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
        )

    access_token = create_access_token(data={"sub": str(user.id), "role": user.role})

    return {
        "access_token": access_token,
        "token_type": "bearer",
    }


@auth_router.get("/me", response_model=UserResponse)
def get_current_user_info(
    current_user: User = Depends(get_current_user),
):
    """
    Get current authenticated user information.
    """
    return current_user
