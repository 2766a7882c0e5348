# app/routers.py
from fastapi import FastAPI

# common
from app.endpoints.common.health import router as health

# account
from app.endpoints.account.auth import router as auth
from app.endpoints.account.users import router as users

# marketing
from app.endpoints.marketing.clients import router as clients
from app.endpoints.marketing.campaigns import router as campaigns
from app.endpoints.marketing.budgets import router as budgets
from app.endpoints.marketing.results import router as results
from app.endpoints.marketing.teams import router as teams
from app.endpoints.marketing.budget_teams import router as budget_teams
from app.endpoints.marketing.budget_results import router as budget_results
from app.endpoints.marketing.budget_results import overview_router as monthly_overview
from app.endpoints.marketing.dashboard import router as dashboard


def register_routers(app: FastAPI) -> None:
    app.include_router(health,            prefix="/health",             tags=["유틸"])
    app.include_router(auth,              prefix="/auth",               tags=["auth"])
    app.include_router(users,             prefix="/users",              tags=["account/users"])

    # ==============================
    # Master data
    # ==============================
    app.include_router(clients,           prefix="/clients",            tags=["marketing/clients"])
    app.include_router(campaigns,         prefix="/campaigns",          tags=["marketing/campaigns"])
    app.include_router(budgets,           prefix="/budgets",            tags=["marketing/budgets"])
    app.include_router(results,           prefix="/results",            tags=["marketing/results"])
    app.include_router(teams,             prefix="/teams",              tags=["marketing/teams"])
    app.include_router(budget_teams,      prefix="/budget-teams",       tags=["marketing/teams"])

    # ==============================
    # 예산·실적 통합
    # ==============================
    app.include_router(budget_results,    prefix="/budget-results",     tags=["marketing/budget-results"])
    app.include_router(monthly_overview,  prefix="/monthly-overview",   tags=["marketing/budget-results"])
    app.include_router(dashboard,         prefix="/dashboard",          tags=["marketing/dashboard"])
