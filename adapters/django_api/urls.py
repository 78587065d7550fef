"""
CBM Django adapter URL routing.
"""

from django.urls import path

from adapters.django_api import views


_BUSINESS = "businesses/<uuid:business_id>"
_CASHBOOK = _BUSINESS + "/cashbooks/<uuid:cashbook_id>"

urlpatterns = [
    path("users/register", views.register_user_view),
    path("businesses", views.businesses_list_view),
    path("businesses/create", views.business_create_view),
    path(_BUSINESS + "/members", views.members_list_view),
    path(_BUSINESS + "/members/add", views.member_add_view),
    path(_BUSINESS + "/members/role", views.member_role_view),
    path(_BUSINESS + "/members/remove", views.member_remove_view),
    path(_BUSINESS + "/cashbooks", views.cashbooks_list_view),
    path(_BUSINESS + "/cashbooks/create", views.cashbook_create_view),
    path(_CASHBOOK + "/delete", views.cashbook_delete_view),
    path(_CASHBOOK + "/ledger", views.ledger_view),
    path(_CASHBOOK + "/entries/create", views.entry_create_view),
    path(_CASHBOOK + "/entries/update", views.entry_update_view),
    path(_CASHBOOK + "/entries/delete", views.entry_delete_view),
    path(_CASHBOOK + "/export.pdf", views.export_pdf_view),
    path(_CASHBOOK + "/export.xlsx", views.export_xlsx_view),
]
