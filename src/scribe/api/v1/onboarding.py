"""Onboarding endpoints - one per setup question, plus status and completion."""

from fastapi import APIRouter, status

from src.scribe.api.dependencies import CurrentAuth, OnboardingServiceDep
from src.scribe.schemas.onboarding import (
    CompleteOnboardingRequest,
    CompleteOnboardingResponse,
    InspirationProfilesUpdate,
    LanguageUpdate,
    OnboardingStatusRead,
    PostFrequencyUpdate,
    PostStyleUpdate,
    StepUpdate,
    ThemeUpdate,
    UserInfoUpdate,
    WebsiteLinkUpdate,
    WorkspaceTypeUpdate,
)
from src.scribe.services import OnboardingState

router = APIRouter(prefix="/users/onboarding", tags=["onboarding"])


def _read(state: OnboardingState) -> OnboardingStatusRead:
    return OnboardingStatusRead(
        status=state.status.value,
        step=state.step,
        total_steps=state.total_steps,
        completed=state.completed,
        data=state.data,
    )


@router.get("/status", response_model=OnboardingStatusRead)
async def get_status(auth: CurrentAuth, service: OnboardingServiceDep) -> OnboardingStatusRead:
    return _read(await service.get_status(auth.user_id))


@router.put("/step", response_model=OnboardingStatusRead)
async def update_step(
    data: StepUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    """Jump to any step; going back is allowed."""
    return _read(await service.update_step(auth.user_id, data.step))


@router.put("/workspace-type", response_model=OnboardingStatusRead)
async def update_workspace_type(
    data: WorkspaceTypeUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_workspace_type(auth.user_id, data.workspace_type))


@router.put("/theme", response_model=OnboardingStatusRead)
async def update_theme(
    data: ThemeUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_theme(auth.user_id, data.theme))


@router.put("/post-style", response_model=OnboardingStatusRead)
async def update_post_style(
    data: PostStyleUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_post_style(auth.user_id, data.post_style))


@router.put("/post-frequency", response_model=OnboardingStatusRead)
async def update_post_frequency(
    data: PostFrequencyUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_post_frequency(auth.user_id, data.post_frequency))


@router.put("/language", response_model=OnboardingStatusRead)
async def update_language(
    data: LanguageUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_language(auth.user_id, data.language))


@router.put("/user-info", response_model=OnboardingStatusRead)
async def update_user_info(
    data: UserInfoUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    state = await service.set_user_info(
        auth.user_id, data.first_name, data.last_name, data.mobile_number
    )
    return _read(state)


@router.put("/website-link", response_model=OnboardingStatusRead)
async def update_website_link(
    data: WebsiteLinkUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_website_link(auth.user_id, data.website_link))


@router.put("/inspiration-profiles", response_model=OnboardingStatusRead)
async def update_inspiration_profiles(
    data: InspirationProfilesUpdate, auth: CurrentAuth, service: OnboardingServiceDep
) -> OnboardingStatusRead:
    return _read(await service.set_inspiration_profiles(auth.user_id, data.inspiration_profiles))


@router.post(
    "/complete",
    response_model=CompleteOnboardingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Missing workspace name or workspace type"},
        409: {"description": "Onboarding already completed"},
    },
)
async def complete_onboarding(
    data: CompleteOnboardingRequest, auth: CurrentAuth, service: OnboardingServiceDep
) -> CompleteOnboardingResponse:
    """Finish onboarding and create the first workspace from the collected answers."""
    workspace = await service.complete_onboarding(auth.user_id, data.workspace_name)
    return CompleteOnboardingResponse(workspace_id=workspace.id)
