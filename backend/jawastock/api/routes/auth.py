"""Auth Routes: register, login, current user.

Invariants:
    - Responses never include the password (UserResponse has no such field)
    - login only verifies credentials; issuing the X-User-Id credential is the
      authentication collaborator's job
"""

from fastapi import APIRouter, Depends, status

from jawastock.api.deps import get_caller, get_optional_caller, get_store
from jawastock.core.records import Caller
from jawastock.core.repository_protocols import MarketplaceStore
from jawastock.schemas.user import LoginRequest, UserCreate, UserResponse
from jawastock.services import user_service

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED,
)
async def register(
    body: UserCreate,
    store: MarketplaceStore = Depends(get_store),
    caller: Caller | None = Depends(get_optional_caller),
):
    return await user_service.register_user(store, body.model_dump(), caller)


@router.post("/login", response_model=UserResponse)
async def login(body: LoginRequest, store: MarketplaceStore = Depends(get_store)):
    return await user_service.authenticate(store, body.email, body.password)


@router.get("/me", response_model=UserResponse)
async def me(
    caller: Caller = Depends(get_caller),
    store: MarketplaceStore = Depends(get_store),
):
    return await user_service.get_user(store, caller.user_id)
