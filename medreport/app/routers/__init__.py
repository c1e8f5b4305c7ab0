"""Routers for medreport."""

from medreport.app.routers.reports import router as reports_router

__all__ = ["reports_router"]
