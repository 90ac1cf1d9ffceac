"""
Dashboard Routes Blueprint

- /api/admin/summary: Back-office figures (tickets, quotes, purchase orders, projects, directory counts)
"""

import logging
from flask import Blueprint

from auth import admin_required
from database.connection import get_db_session
from services.report_service import dashboard_summary
from app.api.responses import ok, api_error

logger = logging.getLogger(__name__)

# Create blueprint
dashboard_bp = Blueprint('dashboard_bp', __name__)


@dashboard_bp.route('/api/admin/summary', methods=['GET'])
@admin_required
def admin_summary():
    """Counts per status plus accepted-quote and purchase totals"""
    try:
        with get_db_session() as db:
            summary = dashboard_summary(db)
        return ok({'summary': summary})
    except Exception as e:
        return api_error(e, "computing dashboard summary")
