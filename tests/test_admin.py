"""Tests for admin moderation helpers."""

from mechapp.schemas.account_schema import AdminUser
from mechapp.services.admin import filter_users, summarize_users

USERS = [
    AdminUser(id=1, name="Ana Pérez", email="ana@correo.cl", account_type="cliente"),
    AdminUser(
        id=2, name="Rosa Díaz", email="rosa@tallerruiz.cl", account_type="mecanico",
        certificate_uploaded=True, certificate_status="validado",
    ),
    AdminUser(
        id=3, name="Diego Soto", email="diego@electroauto.cl", account_type="mecanico",
        certificate_uploaded=True, certificate_status="pendiente",
    ),
    AdminUser(id=4, name="Admin", email="admin@mechapp.cl", account_type="admin"),
]


class TestSummarizeUsers:
    def test_counts(self):
        stats = summarize_users(USERS)
        assert stats.total == 4
        assert stats.mechanics == 2
        assert stats.admins == 1
        assert stats.validated_certificates == 1
        assert stats.pending_certificates == 1

    def test_empty(self):
        assert summarize_users([]).total == 0


class TestFilterUsers:
    def test_all(self):
        assert filter_users(USERS) == USERS

    def test_by_account_type(self):
        assert [u.id for u in filter_users(USERS, account_type="mecanico")] == [2, 3]

    def test_by_certificate_status(self):
        assert [u.id for u in filter_users(USERS, certificate_status="pendiente")] == [3]

    def test_search_name_or_email(self):
        assert [u.id for u in filter_users(USERS, search="  ROSA ")] == [2]
        assert [u.id for u in filter_users(USERS, search="electroauto")] == [3]
