"""Service modules for the medreport app layer."""

from medreport.app.services.lifecycle import ReportSession, report_session, transition
from medreport.app.services.report_renderer import render_report_html

__all__ = [
    "ReportSession",
    "report_session",
    "transition",
    "render_report_html",
]
