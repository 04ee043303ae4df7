"""Account URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.accounts.views import RegisterView

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
]
