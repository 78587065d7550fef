"""
CBM Django Adapter Views
========================
Pass-through HTTP views over the cash book and membership services.

Authentication happens upstream; the caller's user id arrives in the
X-Actor-Id header. Every response body is an envelope:

    {"ok": true,  "data": ...}
    {"ok": false, "error": {"code": ..., "message": ..., "details": {...}}}

except the export views, which return the file itself on success.
"""

from __future__ import annotations

import json
import uuid
from typing import Any, Callable

from django.http import HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt

from adapters.django_api.wiring import build_dependencies
from core.business.models import CashBookRef
from core.errors import (
    CascadeDeleteError,
    CashBookError,
    NotFoundError,
    PermissionDeniedError,
    StoreOperationError,
    ValidationError,
)
from core.documents import ExportArtifact
from engines.cashbook.commands import (
    CashBookCreateRequest,
    EntryCreateRequest,
    EntryUpdateRequest,
)
from engines.membership.commands import (
    BusinessCreateRequest,
    MemberInviteRequest,
    MemberRemoveRequest,
    MemberRoleChangeRequest,
)


ACTOR_HEADER = "X-Actor-Id"


# ══════════════════════════════════════════════════════════════
# ENVELOPE
# ══════════════════════════════════════════════════════════════

def _json_ok(data: Any, status: int = 200) -> JsonResponse:
    return JsonResponse({"ok": True, "data": data}, status=status)


def _json_error(
    code: str,
    message: str,
    status: int = 400,
    details: dict | None = None,
) -> JsonResponse:
    return JsonResponse(
        {
            "ok": False,
            "error": {"code": code, "message": message, "details": details or {}},
        },
        status=status,
    )


def _error_from_exception(exc: CashBookError) -> JsonResponse:
    if isinstance(exc, ValidationError):
        return _json_error(exc.code, str(exc), status=400)
    if isinstance(exc, PermissionDeniedError):
        return _json_error(
            exc.code, str(exc), status=403,
            details={"policy_name": exc.reason.policy_name},
        )
    if isinstance(exc, NotFoundError):
        return _json_error(exc.code, str(exc), status=404)
    if isinstance(exc, CascadeDeleteError):
        return _json_error(
            exc.code, str(exc), status=500,
            details={
                "entries_deleted": exc.entries_deleted,
                "entries_total": exc.entries_total,
            },
        )
    if isinstance(exc, StoreOperationError):
        return _json_error(exc.code, str(exc), status=503)
    return _json_error("ERROR", str(exc), status=500)


def _method_not_allowed() -> JsonResponse:
    return _json_error(
        "METHOD_NOT_ALLOWED",
        "Method not allowed for this endpoint.",
        status=405,
    )


# ══════════════════════════════════════════════════════════════
# REQUEST PARSING
# ══════════════════════════════════════════════════════════════

def _actor_id(request: HttpRequest) -> str:
    actor_id = (request.headers.get(ACTOR_HEADER) or "").strip()
    if not actor_id:
        raise ValidationError(f"{ACTOR_HEADER} header is required.")
    return actor_id


def _parse_json_body(request: HttpRequest) -> dict[str, Any]:
    if not request.body:
        return {}
    try:
        parsed = json.loads(request.body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValidationError("Request body must be valid JSON.") from exc
    if not isinstance(parsed, dict):
        raise ValidationError("Request body must be a JSON object.")
    return parsed


def _require(body: dict[str, Any], key: str) -> Any:
    if key not in body:
        raise ValidationError(f"{key} is required.")
    return body[key]


def _parse_uuid(value: Any, field_name: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError as exc:
        raise ValidationError(f"{field_name} must be a valid UUID.") from exc


def _dispatch(method: str, request: HttpRequest, handler: Callable[[str], HttpResponse]) -> HttpResponse:
    if request.method != method:
        return _method_not_allowed()
    try:
        return handler(_actor_id(request))
    except CashBookError as exc:
        return _error_from_exception(exc)


def _download(artifact: ExportArtifact) -> HttpResponse:
    response = HttpResponse(artifact.content, content_type=artifact.media_type)
    response["Content-Disposition"] = f'attachment; filename="{artifact.filename}"'
    return response


# ══════════════════════════════════════════════════════════════
# USERS & BUSINESSES
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def register_user_view(request: HttpRequest) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        profile = build_dependencies().membership.register_user(
            actor_id, _require(body, "email"), body.get("display_name"),
        )
        return _json_ok(
            {
                "id": profile.user_id,
                "email": profile.email,
                "display_name": profile.display_name,
            }
        )

    return _dispatch("POST", request, handle)


@csrf_exempt
def businesses_list_view(request: HttpRequest) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        businesses = build_dependencies().membership.list_businesses(actor_id)
        return _json_ok(
            [
                {
                    "id": str(b.business_id),
                    "name": b.name,
                    "owner_id": b.owner_id,
                    "created_at": b.created_at.isoformat(),
                }
                for b in businesses
            ]
        )

    return _dispatch("GET", request, handle)


@csrf_exempt
def business_create_view(request: HttpRequest) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        membership = build_dependencies().membership
        owner = membership.register_user(
            actor_id, _require(body, "email"), body.get("display_name"),
        )
        business = membership.create_business(
            owner, BusinessCreateRequest(name=_require(body, "name")),
        )
        return _json_ok({"id": str(business.business_id), "name": business.name}, status=201)

    return _dispatch("POST", request, handle)


# ══════════════════════════════════════════════════════════════
# MEMBERS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def members_list_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        members = build_dependencies().membership.list_members(actor_id, business_id)
        return _json_ok([m.to_dict() for m in members])

    return _dispatch("GET", request, handle)


@csrf_exempt
def member_add_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        invite = MemberInviteRequest(
            email=_require(body, "email"),
            role=body.get("role", "viewer"),
        )
        member = build_dependencies().membership.add_member(actor_id, business_id, invite)
        return _json_ok(member.to_dict(), status=201)

    return _dispatch("POST", request, handle)


@csrf_exempt
def member_role_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        change = MemberRoleChangeRequest(
            user_id=_require(body, "user_id"),
            role=_require(body, "role"),
        )
        build_dependencies().membership.change_member_role(actor_id, business_id, change)
        return _json_ok({"user_id": change.user_id, "role": change.role.value})

    return _dispatch("POST", request, handle)


@csrf_exempt
def member_remove_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        removal = MemberRemoveRequest(user_id=_require(body, "user_id"))
        build_dependencies().membership.remove_member(actor_id, business_id, removal)
        return _json_ok({"user_id": removal.user_id})

    return _dispatch("POST", request, handle)


# ══════════════════════════════════════════════════════════════
# CASH BOOKS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def cashbooks_list_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        cashbooks = build_dependencies().cashbooks.list_cashbooks(
            actor_id, business_id, request.GET.get("q"),
        )
        return _json_ok([book.to_dict() for book in cashbooks])

    return _dispatch("GET", request, handle)


@csrf_exempt
def cashbook_create_view(request: HttpRequest, business_id: uuid.UUID) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        cashbook = build_dependencies().cashbooks.create_cashbook(
            actor_id, business_id, CashBookCreateRequest(name=_require(body, "name")),
        )
        return _json_ok(cashbook.to_dict(), status=201)

    return _dispatch("POST", request, handle)


@csrf_exempt
def cashbook_delete_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        deleted = build_dependencies().cashbooks.delete_cashbook(actor_id, ref)
        return _json_ok({"id": str(cashbook_id), "entries_deleted": deleted})

    return _dispatch("POST", request, handle)


# ══════════════════════════════════════════════════════════════
# LEDGER & ENTRIES
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def ledger_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        view = build_dependencies().cashbooks.read_ledger(actor_id, ref)
        return _json_ok(view.to_dict(request.GET.get("q")))

    return _dispatch("GET", request, handle)


@csrf_exempt
def entry_create_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        entry_request = EntryCreateRequest(
            type=_require(body, "type"),
            amount=_require(body, "amount"),
            date=body.get("date"),
            remark=body.get("remark"),
        )
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        entry_id = build_dependencies().cashbooks.create_entry(actor_id, ref, entry_request)
        return _json_ok({"id": str(entry_id)}, status=201)

    return _dispatch("POST", request, handle)


@csrf_exempt
def entry_update_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        update = EntryUpdateRequest(
            entry_id=_require(body, "id"),
            type=_require(body, "type"),
            amount=_require(body, "amount"),
            date=_require(body, "date"),
            remark=body.get("remark"),
        )
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        build_dependencies().cashbooks.update_entry(actor_id, ref, update)
        return _json_ok({"id": str(update.entry_id)})

    return _dispatch("POST", request, handle)


@csrf_exempt
def entry_delete_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        body = _parse_json_body(request)
        entry_id = _parse_uuid(_require(body, "id"), "id")
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        build_dependencies().cashbooks.delete_entry(actor_id, ref, entry_id)
        return _json_ok({"id": str(entry_id)})

    return _dispatch("POST", request, handle)


# ══════════════════════════════════════════════════════════════
# EXPORTS
# ══════════════════════════════════════════════════════════════

@csrf_exempt
def export_pdf_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        artifact = build_dependencies().cashbooks.export_pdf(
            actor_id, ref, request.GET.get("q"),
        )
        return _download(artifact)

    return _dispatch("GET", request, handle)


@csrf_exempt
def export_xlsx_view(
    request: HttpRequest, business_id: uuid.UUID, cashbook_id: uuid.UUID
) -> HttpResponse:
    def handle(actor_id: str) -> HttpResponse:
        ref = CashBookRef(business_id=business_id, cashbook_id=cashbook_id)
        artifact = build_dependencies().cashbooks.export_xlsx(
            actor_id, ref, request.GET.get("q"),
        )
        return _download(artifact)

    return _dispatch("GET", request, handle)
