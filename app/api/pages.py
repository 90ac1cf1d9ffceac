"""
Page Routes Blueprint

Handles all template rendering routes for the public site, the customer
area and the back office. Pages only render; data flows through the JSON API.
"""

from flask import Blueprint, render_template, abort

import auth
from database.connection import get_db_session
from database.models import SERVICE_TYPES, TICKET_URGENCIES
from services.catalog_repository import CatalogRepository
from app.utils.site_content import SERVICE_CATEGORIES, CONTACT, FAQS, ADMIN_SECTIONS

# Create blueprint
pages_bp = Blueprint('pages', __name__)

ADMIN_PAGES = dict(ADMIN_SECTIONS)


# ============================================================================
# PUBLIC PAGES
# ============================================================================

@pages_bp.route('/')
def index():
    return render_template('index.html', categories=SERVICE_CATEGORIES)


@pages_bp.route('/about')
def about():
    return render_template('about.html')


@pages_bp.route('/services')
def services():
    """Service categories with their catalog entries"""
    with get_db_session() as db:
        catalog = CatalogRepository(db).services_by_type()
    return render_template('services.html', categories=SERVICE_CATEGORIES, catalog=catalog)


@pages_bp.route('/services/<service_type>')
def service_type_page(service_type):
    """One service category; unknown categories are 404"""
    if service_type not in SERVICE_CATEGORIES:
        abort(404)
    with get_db_session() as db:
        services = CatalogRepository(db).services_by_type().get(service_type, [])
    return render_template(
        'service_type.html',
        service_type=service_type,
        category=SERVICE_CATEGORIES[service_type],
        services=services
    )


@pages_bp.route('/contact')
def contact():
    return render_template('contact.html', contact=CONTACT)


@pages_bp.route('/faq')
def faq():
    return render_template('faq.html', faqs=FAQS)


@pages_bp.route('/store')
def store():
    """Spare parts from the inventory"""
    with get_db_session() as db:
        parts = CatalogRepository(db).list_spare_parts(per_page=200)['items']
    return render_template('store.html', parts=parts)


@pages_bp.route('/blog')
def blog():
    return render_template('blog.html')


@pages_bp.route('/shop')
def shop():
    return render_template('shop.html')


@pages_bp.route('/quote')
def quote_request():
    return render_template('quote.html', service_types=SERVICE_TYPES)


# ============================================================================
# CUSTOMER AREA
# ============================================================================

@pages_bp.route('/tickets/new')
@auth.login_required
def new_ticket():
    return render_template(
        'ticket_new.html', service_types=SERVICE_TYPES, urgencies=TICKET_URGENCIES
    )


@pages_bp.route('/profile')
@auth.login_required
def profile():
    return render_template('profile.html', user=auth.get_current_user())


@pages_bp.route('/profile/my-tickets')
@auth.login_required
def my_tickets():
    return render_template('my_tickets.html')


# ============================================================================
# BACK OFFICE
# ============================================================================

@pages_bp.route('/admin')
@auth.admin_required
def admin_dashboard():
    return render_template('admin/dashboard.html', sections=ADMIN_SECTIONS, active='dashboard')


@pages_bp.route('/admin/tickets/<ticket_id>')
@auth.admin_required
def admin_ticket_detail(ticket_id):
    return render_template(
        'admin/ticket_detail.html', sections=ADMIN_SECTIONS, active='tickets', ticket_id=ticket_id
    )


@pages_bp.route('/admin/<section>')
@auth.admin_required
def admin_section(section):
    """Management page for one back-office section"""
    if section not in ADMIN_PAGES or section == 'dashboard':
        abort(404)
    return render_template(
        'admin/section.html',
        sections=ADMIN_SECTIONS,
        active=section,
        title=ADMIN_PAGES[section]
    )
