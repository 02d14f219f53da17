"""FastAPI endpoints for the Identity domain."""

from fastapi import APIRouter, Depends, Request, Response
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from identity.address.management import SaveAddress, address_of
from identity.api.dependencies import (
    clear_session_cookie,
    require_user,
    session_id_from,
    set_session_cookie,
)
from identity.api.schemas import (
    AddressRequest,
    AddressResponse,
    LoginRequest,
    RegisterRequest,
    UpdateUserRequest,
    UserResponse,
)
from identity.session.authentication import login, logout, register_user, start_session
from identity.user.profile import UpdateProfile
from identity.user.user import User
from shared.schemas import StatusResponse

router = APIRouter(prefix="/api", tags=["identity"])


@router.post("/register", status_code=201, response_model=UserResponse)
def register(body: RegisterRequest, response: Response) -> UserResponse:
    user = register_user(
        username=body.username,
        password=body.password,
        confirm_password=body.confirm_password,
        email=body.email,
        name=body.name,
        phone=body.phone,
        address=body.address.model_dump(exclude_none=True) if body.address else None,
    )
    set_session_cookie(response, start_session(user.id))
    return UserResponse.from_user(user)


@router.post("/login", response_model=UserResponse)
def log_in(body: LoginRequest, response: Response) -> UserResponse:
    user, session_id = login(body.username, body.password)
    set_session_cookie(response, session_id)
    return UserResponse.from_user(user)


@router.post("/logout", response_model=StatusResponse)
async def log_out(request: Request, response: Response) -> StatusResponse:
    logout(session_id_from(request))
    clear_session_cookie(response)
    return StatusResponse()


@router.get("/user", response_model=UserResponse)
async def get_user(user: User = Depends(require_user)) -> UserResponse:
    return UserResponse.from_user(user)


@router.put("/user", response_model=UserResponse)
async def update_user(body: UpdateUserRequest, user: User = Depends(require_user)) -> UserResponse:
    command = UpdateProfile(
        user_id=str(user.id),
        name=body.name,
        email=body.email,
        phone=body.phone,
    )
    current_domain.process(command, asynchronous=False)
    return UserResponse.from_user(current_domain.repository_for(User).get(user.id))


@router.get("/user/address", response_model=AddressResponse)
async def get_address(user: User = Depends(require_user)) -> AddressResponse:
    address = address_of(user.id)
    if address is None:
        raise ObjectNotFoundError("Address not found")
    return AddressResponse.from_address(address)


@router.post("/user/address", response_model=AddressResponse)
async def save_address(body: AddressRequest, user: User = Depends(require_user)) -> AddressResponse:
    command = SaveAddress(user_id=str(user.id), **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return AddressResponse.from_address(address_of(user.id))
