"""User profile API routes."""

from fastapi import APIRouter, Depends, Query, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_profile_service
from api.v1.schemas.common import MessageResponse, WarningResponse
from api.v1.schemas.profile import (
    AdminClaimUpdate,
    ProfileDetailResponse,
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    UserListResponse,
    UserSearchResponse,
)
from core.rate_limit import limiter
from domain.services.profile_service import MAX_PAGE_SIZE, ProfileService, ProfileUpdateResult

router = APIRouter(prefix="/users", tags=["users"])


def _update_response(result: ProfileUpdateResult) -> ProfileUpdateResponse:
    return ProfileUpdateResponse(
        profile=ProfileResponse.model_validate(result.profile),
        created=result.created,
        warnings=[WarningResponse(**w.as_dict()) for w in result.warnings],
    )


# Current user (from token)


@router.get(
    "/profile",
    response_model=ProfileDetailResponse,
    summary="Get own profile",
    responses={404: {"description": "Profile not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_current_user_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get the authenticated user's profile."""
    profile = await service.get_profile(user, user.uid)
    return ProfileDetailResponse(profile=ProfileResponse.model_validate(profile))


@router.put(
    "/profile",
    response_model=ProfileUpdateResponse,
    summary="Update own profile",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_current_user_profile(
    request: Request,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    """Partially update the authenticated user's profile.

    Only the keys present in the body change. A missing profile is created.
    """
    result = await service.update_profile(user, user.uid, body.changes())
    return _update_response(result)


@router.post(
    "/profile/complete",
    response_model=ProfileDetailResponse,
    summary="Mark own profile complete",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def complete_current_user_profile(
    request: Request,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Mark the authenticated user's profile as complete."""
    profile = await service.mark_profile_complete(user, user.uid)
    return ProfileDetailResponse(profile=ProfileResponse.model_validate(profile))


# Specific user (by uid): self or admin


@router.get(
    "/profile/{uid}",
    response_model=ProfileDetailResponse,
    summary="Get a profile",
    responses={
        403: {"description": "Access denied"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_user_profile(
    request: Request,
    uid: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Get a profile by uid. Only the owner or an admin may read it."""
    profile = await service.get_profile(user, uid)
    return ProfileDetailResponse(profile=ProfileResponse.model_validate(profile))


@router.put(
    "/profile/{uid}",
    response_model=ProfileUpdateResponse,
    summary="Update a profile",
    responses={403: {"description": "Access denied"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_user_profile(
    request: Request,
    uid: str,
    body: ProfileUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    """Partially update a profile by uid (owner or admin)."""
    result = await service.update_profile(user, uid, body.changes())
    return _update_response(result)


@router.post(
    "/profile/{uid}/complete",
    response_model=ProfileDetailResponse,
    summary="Mark a profile complete",
    responses={
        403: {"description": "Access denied"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def complete_user_profile(
    request: Request,
    uid: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> ProfileDetailResponse:
    """Mark a profile as complete (owner or admin)."""
    profile = await service.mark_profile_complete(user, uid)
    return ProfileDetailResponse(profile=ProfileResponse.model_validate(profile))


@router.delete(
    "/profile/{uid}",
    response_model=MessageResponse,
    summary="Delete a user",
    responses={403: {"description": "Access denied"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_user_profile(
    request: Request,
    uid: str,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Delete the profile and the account behind it (owner or admin)."""
    await service.delete_profile(user, uid)
    return MessageResponse(message="User profile deleted successfully")


# Admin


@router.get(
    "/all",
    response_model=UserListResponse,
    summary="List users",
    responses={403: {"description": "Admin access required"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_all_users(
    request: Request,
    user: CurrentUser,
    limit: int = Query(10, ge=1, le=MAX_PAGE_SIZE),
    last_doc_id: str | None = Query(None, alias="lastDocId"),
    service: ProfileService = Depends(get_profile_service),
) -> UserListResponse:
    """Page through all users, newest first. Pass `lastDocId` for the next page."""
    page = await service.list_profiles(user, limit=limit, last_doc_id=last_doc_id)
    return UserListResponse(
        users=[ProfileResponse.model_validate(p) for p in page.items],
        last_doc_id=page.last_doc_id,
        has_more=page.has_more,
    )


@router.get(
    "/search",
    response_model=UserSearchResponse,
    summary="Search users by email",
    responses={
        400: {"description": "Email query parameter is required"},
        403: {"description": "Admin access required"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def search_users_by_email(
    request: Request,
    user: CurrentUser,
    email: str = Query(""),
    service: ProfileService = Depends(get_profile_service),
) -> UserSearchResponse:
    """Find users whose email matches exactly."""
    profiles = await service.search_by_email(user, email)
    return UserSearchResponse(users=[ProfileResponse.model_validate(p) for p in profiles])


@router.put(
    "/{uid}/admin",
    response_model=MessageResponse,
    summary="Grant or revoke admin",
    responses={403: {"description": "Admin access required"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def set_admin_claim(
    request: Request,
    uid: str,
    body: AdminClaimUpdate,
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> MessageResponse:
    """Set the admin custom claim on a user."""
    await service.set_admin(user, uid, body.admin)
    verb = "granted to" if body.admin else "revoked from"
    return MessageResponse(message=f"Admin privileges {verb} {uid}")
