# maisha_console/routers/upload.py
from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.downloads import csv_download
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.member_repo import MemberRepository
from maisha_console.services.csv_service import MEMBERS_TEMPLATE_CSV, failed_numbers_csv
from maisha_console.services.scope import FormError, group_choices, scoped_group_id
from maisha_console.services.upload_service import ImportResult, UploadService

router = APIRouter(prefix="/upload", tags=["Excel Upload"])

service = UploadService(MemberRepository())


async def _upload_page(
    request: Request,
    api: ApiClient,
    auth: AuthContext,
    gid: int | None,
    result: ImportResult | None = None,
):
    groups = []
    try:
        groups = await group_choices(api, auth)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load groups")
    return render(
        request,
        "upload.html",
        {"group_id": gid, "groups": groups, "result": result},
    )


@router.get("")
async def upload_page(
    request: Request,
    group_id: str | None = None,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("upload")),
):
    return await _upload_page(request, api, auth, scoped_group_id(auth, group_id))


@router.get("/template.csv")
def download_template(auth: AuthContext = Depends(require_feature("upload"))):
    return csv_download(MEMBERS_TEMPLATE_CSV, "members_template.csv")


@router.post("/failed.csv")
def download_failed(
    phones: str = Form(""),
    auth: AuthContext = Depends(require_feature("upload")),
):
    """The result page posts back the failed numbers it shows."""
    failed = [p for p in phones.split() if p.isdigit()]
    return csv_download(failed_numbers_csv(failed), "failed_numbers.csv")


@router.post("")
async def import_members(
    request: Request,
    file: UploadFile = File(...),
    group_id: str = Form(""),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("upload")),
):
    """
    Run the import and render its result directly; nothing about the
    import is kept in the session.
    """
    gid = scoped_group_id(auth, group_id or None)
    raw = await file.read()
    try:
        result = await service.import_members(api, raw.decode("utf-8-sig", errors="replace"), gid)
    except FormError as e:
        notify_error(request, str(e))
        return RedirectResponse("/upload", status_code=303)

    if result.failed:
        notify_error(
            request,
            f"{result.success} added, {len(result.failed)} failed",
            title="Import finished with errors",
        )
    else:
        notify(request, "Import complete", f"{result.success} members added")
    return await _upload_page(request, api, auth, gid, result)
