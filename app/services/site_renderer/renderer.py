import logging
import os
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from app.services.site_renderer.view_model import build_view_model

logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "templates")
PAGE_TEMPLATE = "site/business_page.html"

# Autoescape is on for every template; JSON goes through |tojson
environment = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=True,
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
    keep_trailing_newline=True,
)


def render_view_model(vm: Dict[str, Any]) -> str:
    return environment.get_template(PAGE_TEMPLATE).render(**vm)


def render_business_page(
    business: Any,
    theme: Optional[str] = None,
    api_base_url: Optional[str] = None,
    site: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Render the complete public HTML document for a business.

    Equal inputs give byte-identical output: no clock, randomness or I/O
    beyond loading the template files.
    """
    vm = build_view_model(business, theme=theme, api_base_url=api_base_url, site=site)
    html = render_view_model(vm)
    logger.debug(
        f"Rendered page for {vm['business']['slug']!r} "
        f"(theme={vm['theme_name']}, sections={[name for name, shown in vm['sections'].items() if shown]})"
    )
    return html
