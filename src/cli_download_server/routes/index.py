"""HTML index page listing the available downloads."""

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from cli_download_server.config import FILE_SERVER_API_PATH

router = APIRouter(tags=["index"])

_templates = Environment(
    loader=PackageLoader("cli_download_server", "templates"),
    autoescape=select_autoescape(["html", "jinja"]),
    undefined=StrictUndefined,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_index(request: Request) -> str:
    """Render the download listing for the app's registry."""
    registry = request.app.state.context.registry
    template = _templates.get_template("index.html.jinja")
    return template.render(
        descriptors=registry.sorted_descriptors(),
        file_prefix=FILE_SERVER_API_PATH,
    )


@router.get("/", response_class=HTMLResponse)
async def index(request: Request) -> HTMLResponse:
    return HTMLResponse(render_index(request))
