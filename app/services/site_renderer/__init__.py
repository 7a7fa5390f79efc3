from app.services.site_renderer.renderer import render_business_page, render_view_model
from app.services.site_renderer.view_model import build_view_model, default_site

__all__ = ["render_business_page", "render_view_model", "build_view_model", "default_site"]
