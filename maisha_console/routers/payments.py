# maisha_console/routers/payments.py
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from maisha_console.core.api_client import ApiClient, ApiError, get_api_client
from maisha_console.core.auth import AuthContext, require_feature
from maisha_console.core.notifications import notify, notify_error
from maisha_console.core.templating import render
from maisha_console.repositories.payment_repo import PaymentRepository
from maisha_console.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])

repo = PaymentRepository()
service = PaymentService(repo)


@router.get("")
async def payments_page(
    request: Request,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("payments")),
):
    transactions = []
    try:
        transactions = await service.transactions(api)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load transactions")
    return render(request, "payments/index.html", {"transactions": transactions})


@router.post("")
async def initiate_payment(
    request: Request,
    amount: float = Form(0),
    phone: str = Form(""),
    currency: str = Form(""),
    payment_mode: str = Form(""),
    message: str = Form(""),
    transfer_amount: list[str] = Form([]),
    transfer_phone: list[str] = Form([]),
    transfer_message: list[str] = Form([]),
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("payments")),
):
    """
    Transfer rows arrive as parallel `transfer_*` fields, one entry per row.
    """
    rows = [
        {"amount": a, "phone": p, "message": m}
        for a, p, m in zip(transfer_amount, transfer_phone, transfer_message)
    ]
    try:
        transaction_id = await service.initiate(
            api,
            amount=amount,
            phone=phone,
            currency=currency,
            payment_mode=payment_mode,
            message=message,
            transfers=rows,
        )
    except ValueError:
        notify_error(request, "Amount and phone number are required")
    except ApiError as e:
        notify_error(request, e.message, title="Payment Failed")
    else:
        notify(request, "Payment initiated", f"Transaction ID: {transaction_id}")
        return RedirectResponse(f"/payments/{transaction_id}", status_code=303)
    return RedirectResponse("/payments", status_code=303)


@router.get("/status")
async def check_status(
    request: Request,
    transaction_id: str = "",
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("payments")),
):
    if not transaction_id.strip():
        notify_error(request, "Please enter a transaction ID")
        return RedirectResponse("/payments", status_code=303)
    status = None
    try:
        status = await service.check_status(api, transaction_id)
    except ApiError as e:
        notify_error(request, e.message, title="Status check failed")
    return render(
        request,
        "payments/status.html",
        {"transaction_id": transaction_id.strip(), "status": status},
    )


@router.get("/{transaction_id}")
async def transaction_detail(
    request: Request,
    transaction_id: str,
    api: ApiClient = Depends(get_api_client),
    auth: AuthContext = Depends(require_feature("payments")),
):
    transaction = None
    try:
        transaction = await service.transaction(api, transaction_id)
    except ApiError as e:
        notify_error(request, e.message, title="Failed to load transaction")
    return render(
        request,
        "payments/detail.html",
        {"transaction_id": transaction_id, "transaction": transaction},
    )
