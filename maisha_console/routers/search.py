# maisha_console/routers/search.py
from fastapi import APIRouter, Depends, Request

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_session
from maisha_console.core.notifications import notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.group_repo import GroupRepository
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.services.search_service import SearchResults, SearchService

router = APIRouter(tags=["Search"])

service = SearchService(GroupRepository(), MemberRepository())


@router.get("/search")
async def search(
    request: Request,
    q: str = "",
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_session),
):
    try:
        results = await service.search(api, auth, q)
    except ApiError as e:
        notify_error(request, e.message, title="Search failed")
        results = SearchResults()
    return render(request, "search.html", {"q": q, "results": results})
